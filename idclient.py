#
# A Python implementation of the client end of the identd protocol
# (RFC 1413). Every query can have a timeout; without one a silent
# identd can hang the caller forever.
#
# see query and sockident functions.
#
# query returns a Response or raises one of ResponseError (the server
# said ERROR), ProtocolError (we could not make sense of the reply) or
# TransportError (the network failed us somewhere).

import socket, select, os, time

# some constants:
MAXSIZE = 1024		# no sane identd return will ever be over this size
IDENTD = 113		# identd/auth/etc TCP port
DEFAULTCHARSET = "US-ASCII"

# RFC 1413 error types. We pass these through; callers decide what
# they mean.
INVALID_PORT = "INVALID-PORT"
NO_USER = "NO-USER"
HIDDEN_USER = "HIDDEN-USER"
UNKNOWN_ERROR = "UNKNOWN-ERROR"

class IdentError(Exception):
	pass

class ResponseError(IdentError):
	"""The identd server answered with an ERROR reply."""
	def __init__(self, type):
		IdentError.__init__(self, type)
		self.type = type
	def __str__(self):
		return "Ident error: %s" % (self.type,)

class ProtocolError(IdentError):
	"""The reply could not be parsed; .line is what we got."""
	def __init__(self, line):
		IdentError.__init__(self, line)
		self.line = line
	def __str__(self):
		return "Unexpected response from server: %s" % (self.line,)

class TransportError(IdentError):
	"""Connecting, writing or reading failed. .cause is the
	underlying exception, if there was one."""
	def __init__(self, msg, cause = None):
		IdentError.__init__(self, msg)
		self.cause = cause

class Response:
	def __init__(self, os, charset, identifier):
		self.os = os
		self.charset = charset
		self.identifier = identifier
	def __eq__(self, other):
		if not isinstance(other, Response):
			return NotImplemented
		return (self.os, self.charset, self.identifier) == \
		       (other.os, other.charset, other.identifier)
	def __repr__(self):
		return "<Response: OS %r, charset %r, identifier %r>" % \
		       (self.os, self.charset, self.identifier)
	def __str__(self):
		return "%s,%s %s" % (self.os, self.charset, self.identifier)

def _timedout(what):
	e = socket.timeout("timed out " + what)
	te = TransportError("timed out " + what, e)
	te.__cause__ = e
	return te

class SafeSock:
	"""A wrapper class for sockets that times out operations.

	Initialized with the socket and the wait interval. The wait
	interval is the TOTAL amount of time all operations on this socket
	are allowed to take, as opposed to the time that any individual
	operation is allowed to take. A wait of None or <= 0 means wait
	forever. setdeadline() restarts the clock."""
	def __init__(self, sock, wait):
		sock.setblocking(False)
		self._s = sock
		self.setdeadline(wait)
	def setdeadline(self, wait):
		if wait is not None and wait > 0:
			self._w = time.monotonic() + wait
		else:
			self._w = None
	def fileno(self):
		return self._s.fileno()
	# dir is 0 for read, 1 for write. what is for the error message.
	def selwait(self, dir, what):
		r = w = []
		if self._w is not None:
			tmo = self._w - time.monotonic()
			# we may have overstayed our welcome. Make sure.
			if tmo <= 0:
				raise _timedout(what)
		else:
			tmo = None
		if dir == 0:
			r = [self._s]
		else:
			w = [self._s]
		try:
			(r, w, x) = select.select(r, w, [self._s], tmo)
		except OSError as e:
			raise TransportError("%s: %s" % (what, e), e) from e
		if not (r or w or x):
			raise _timedout(what)
	def tryop(self, op, args, what):
		try:
			return (True, op(*args))
		except (BlockingIOError, InterruptedError):
			return (False, None)
		except OSError as e:
			raise TransportError("%s: %s" % (what, e), e) from e
	# waitop waits until the socket is ready, then does op. A
	# spurious wakeup just goes around again; the deadline still
	# applies.
	def waitop(self, dir, what, op, *args):
		while True:
			self.selwait(dir, what)
			(done, r) = self.tryop(op, args, what)
			if done:
				return r
	# close is, by definition, a 'go away we don't CARE' operation.
	def close(self):
		try:
			self._s.close()
		except OSError:
			pass
	# A nonblocking connect finishes when the socket becomes writable;
	# SO_ERROR then tells us whether it worked.
	def connect(self, addr):
		what = "connecting to %s" % (addr[0],)
		(done, _) = self.tryop(self._s.connect, (addr,), what)
		if done:
			return
		self.selwait(1, what)
		err = self._s.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
		if err:
			e = OSError(err, os.strerror(err))
			raise TransportError("%s: %s" % (what, e), e) from e
	# caller must iterate to accumulate a full buffer (we can't
	# tell what's considered 'full')
	def recv(self, size):
		return self.waitop(0, "reading reply", self._s.recv, size)
	# We repeatedly send the remaining piece of the buffer down,
	# counting on the deadline to blow us away if we're not done.
	def send(self, what):
		res = len(what)
		while what:
			r = self.waitop(1, "sending query", self._s.send, what)
			what = what[r:]
		return res
	# this cannot time out.
	def bind(self, addr):
		try:
			return self._s.bind(addr)
		except OSError as e:
			raise TransportError("binding to %s: %s" % (addr[0], e),
					     e) from e

def dial(host, port = IDENTD, timeout = None, bindaddr = None):
	"""Connect to port on host and return a SafeSock.

	Every address host resolves to is tried in turn, all within the
	one timeout. Raises TransportError if none of them work."""
	try:
		addrs = socket.getaddrinfo(host, port, 0, socket.SOCK_STREAM)
	except OSError as e:
		raise TransportError("cannot resolve %s: %s" % (host, e),
				     e) from e
	if timeout is not None and timeout > 0:
		end = time.monotonic() + timeout
	else:
		end = None
	lasterr = None
	for (fam, stype, proto, _, addr) in addrs:
		if end is not None:
			wait = end - time.monotonic()
			if wait <= 0:
				raise _timedout("connecting to %s" % (host,))
		else:
			wait = None
		try:
			s = SafeSock(socket.socket(fam, stype, proto), wait)
		except OSError as e:
			lasterr = TransportError("socket: %s" % (e,), e)
			continue
		try:
			# we must bind to the specific interface, because of
			# the case of multihomed hosts; otherwise the remote
			# identd will either give us errors or the wrong
			# answer.
			if bindaddr:
				s.bind((bindaddr, 0))
			s.connect(addr)
			return s
		except TransportError as e:
			s.close()
			lasterr = e
			# out of time is out of time, for every address.
			if isinstance(e.cause, socket.timeout):
				raise
	if lasterr is None:
		lasterr = TransportError("no addresses for %s" % (host,))
	raise lasterr

def formatquery(serverport, clientport):
	"""Return the query line. Note the order: clientport goes first."""
	return ("%d, %d\r\n" % (clientport, serverport)).encode("ascii")

def readline(conn, maxsize = MAXSIZE):
	"""Read one line, through the \\n, from conn.

	EOF before the newline is a TransportError; so many bytes without
	one that it cannot be an identd reply is a ProtocolError. Anything
	after the newline is discarded."""
	l = b""
	while b"\n" not in l:
		if len(l) >= maxsize:
			raise ProtocolError(_decode(l).strip())
		r = conn.recv(maxsize)
		# maybe we got an EOF.
		if not r:
			e = EOFError("connection closed before end of line")
			raise TransportError(str(e), e) from e
		l = l + r
	# chomp off short in case of a multi-line return.
	return _decode(l[:l.index(b"\n") + 1])

def _decode(b):
	return b.decode("utf-8", "surrogateescape")

def parseresponse(line):
	"""Parse an identd reply line into a Response.

	The line looks like '<ports> : USERID : <os>[,<charset>] : <id>'
	or '<ports> : ERROR : <type>'. We don't look at the echoed ports.
	Raises ResponseError for ERROR replies and ProtocolError for
	anything we can't parse."""
	line = line.strip()
	fields = line.split(" : ", 3)
	if len(fields) < 3:
		raise ProtocolError(line)
	if fields[1] == "USERID":
		if len(fields) != 4:
			raise ProtocolError(line)
		oc = fields[2].split(",", 1)
		if len(oc) == 2:
			charset = oc[1]
		else:
			charset = DEFAULTCHARSET
		return Response(oc[0], charset, fields[3])
	elif fields[1] == "ERROR":
		if len(fields) != 3:
			raise ProtocolError(line)
		raise ResponseError(fields[2])
	raise ProtocolError(line)

# The user-serviceable parts.

def query(host, serverport, clientport, timeout = 0, port = IDENTD,
	  bindaddr = None, dialer = None):
	"""Perform the identd protocol against host and return a Response.

	serverport is the port on our end of the connection being asked
	about and clientport the port on host's end; they go out on the
	wire as '<clientport>, <serverport>'. A positive timeout bounds
	the connect, then separately bounds sending the query and reading
	the reply. dialer(host, port, timeout, bindaddr) must return
	something that acts like a SafeSock; it defaults to dial."""
	if dialer is None:
		dialer = dial
	conn = dialer(host, port, timeout, bindaddr)
	try:
		# restart the clock for the exchange itself.
		if timeout is not None and timeout > 0:
			conn.setdeadline(timeout)
		conn.send(formatquery(serverport, clientport))
		l = readline(conn)
	finally:
		conn.close()
	return parseresponse(l)

def sockident(sock, timeout = 0, port = IDENTD):
	"""Given a connected TCP socket, return identd information about it.

	The peer's identd is asked who owns its end of the connection.
	Raises the same errors as query."""
	(rh, rp) = sock.getpeername()[:2]
	(lh, lp) = sock.getsockname()[:2]
	return query(rh, lp, rp, timeout, port = port, bindaddr = lh)
