#
# Argument conversion routines for the command line front end. Each
# takes the error to raise, so callers get their own kind of failure.

def int_or_raise(s, error):
	"""Return int(first-arg) or raise the second argument as an error."""
	try:
		return int(s)
	except ValueError:
		raise error("not an integer: " + s)

# A TCP port number. identd itself will reject silly ones, but there
# is no point in asking it.
def port_or_raise(s, error):
	n = int_or_raise(s, error)
	if n < 0 or n > 65535:
		raise error("port out of range: " + s)
	return n

# We take 'N', 'Ns', 'Nm' or 'Nh', where N may have a fraction. identd
# timeouts are short, so there is no 'd'.
mults = {'s': 1, 'm': 60, 'h': 60 * 60}
def getsecs_or_raise(val, err):
	if not val:
		raise err("empty time duration")
	if val[-1] in mults:
		m = mults[val[-1]]
		val = val[:-1]
	elif val[-1].isdigit() or val[-1] == '.':
		m = 1
	else:
		raise err("time duration does not end in s/m/h")
	try:
		num = float(val)
	except ValueError:
		raise err("not a number in time duration")
	if num < 0:
		raise err("negative time duration")
	return num * m
