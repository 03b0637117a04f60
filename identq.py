#
# identq: ask a host's identd who owns a TCP connection, from the
# command line. This is a thin front end to idclient.query; it mostly
# exists for poking at misbehaving identds by hand.
#
import sys
import getopt

import idclient
import log
import util

# Exit statuses, one per outcome.
EX_OK = 0
EX_RESPONSE = 1
EX_PROTOCOL = 2
EX_TRANSPORT = 3
EX_USAGE = 4

class BadArg(Exception):
	pass

def usage():
	log.die("usage: identq [-v|-V NUM] [-l] [-a] [-p PROGNAME] [-t TIMEOUT] [-P PORT] [-b BINDADDR] host serverport clientport", EX_USAGE)

# Run the query and report on it. Returns the exit status.
def doquery(host, sport, cport, timeout, port, bindaddr, allfields):
	log.debug(1, "asking %s port %d about %d, %d (timeout %s)" % \
		  (host, port, cport, sport, timeout or "none"))
	try:
		r = idclient.query(host, sport, cport, timeout, port = port,
				   bindaddr = bindaddr)
	except idclient.ResponseError as e:
		log.report("%s: %s" % (host, e))
		return EX_RESPONSE
	except idclient.ProtocolError as e:
		log.error("%s: %s" % (host, e))
		return EX_PROTOCOL
	except idclient.TransportError as e:
		log.error("%s: %s" % (host, e))
		return EX_TRANSPORT
	log.debug(2, "%s answered %r" % (host, r))
	if allfields:
		sys.stdout.write("%s\n" % (r,))
	else:
		sys.stdout.write("%s\n" % (r.identifier,))
	return EX_OK

def main(sargs):
	usesyslog = 0
	allfields = 0
	timeout = 0
	port = idclient.IDENTD
	bindaddr = None
	try:
		opts, args = getopt.getopt(sargs, "vV:p:laP:t:b:", [])
	except getopt.error as cause:
		log.warn(str(cause))
		usage()
	try:
		for o, a in opts:
			if o == '-v':
				log.setdebuglevel(1)
			elif o == '-V':
				log.setdebuglevel(util.int_or_raise(a, BadArg))
			elif o == '-p':
				log.setprogname(a)
			elif o == '-l':
				usesyslog = 1
			elif o == '-a':
				allfields = 1
			elif o == '-t':
				timeout = util.getsecs_or_raise(a, BadArg)
			elif o == '-P':
				port = util.port_or_raise(a, BadArg)
			elif o == '-b':
				bindaddr = a
		if len(args) != 3:
			usage()
		sport = util.port_or_raise(args[1], BadArg)
		cport = util.port_or_raise(args[2], BadArg)
	except BadArg as e:
		log.warn(str(e))
		usage()
	if usesyslog:
		log.usesyslog()
	return doquery(args[0], sport, cport, timeout, port, bindaddr,
		       allfields)

def run():
	sys.exit(main(sys.argv[1:]))

if __name__ == "__main__":
	run()
