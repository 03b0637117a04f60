#
# Shims for socket and select, so we can test idclient's handling of
# the network without a network. Look ma, shims.
import socket

# Fake sockets.
# These deliberately have no fileno method, so they detonate on contact
# with a real select() call.
class FakeSocket:
	"""connectR is the errno connect() fails with (0 to succeed),
	soerror what SO_ERROR reports afterwards, and recvR either an
	errno to fail recv() with or a list of chunks to hand back."""
	def __init__(self, connectR = 0, recvR = (), soerror = 0):
		self.blocking = True
		self.connectR = connectR
		self.soerror = soerror
		if isinstance(recvR, int):
			self.recvR = recvR
		else:
			self.recvR = list(recvR)
		self.addr = None
		self.bound = None
		self.sent = b""
		self.closed = False
	def setblocking(self, flag):
		self.blocking = flag
	def bind(self, addr):
		self.bound = addr
	def connect(self, addr):
		assert not self.blocking
		assert len(addr) == 2
		self.addr = addr
		if self.connectR:
			raise socket.error(self.connectR, "BOGUS CONNECT")
	def getsockopt(self, lvl, what):
		assert lvl == socket.SOL_SOCKET
		assert what == socket.SO_ERROR
		return self.soerror
	def send(self, data):
		assert not self.blocking
		self.sent = self.sent + data
		return len(data)
	def recv(self, n):
		assert not self.blocking
		if isinstance(self.recvR, int):
			raise socket.error(self.recvR, "BOGUS RECV")
		if not self.recvR:
			return b""
		r = self.recvR.pop(0)
		assert len(r) <= n
		return r
	def close(self):
		self.closed = True

# Every fake socket handed out, so tests can look at them afterwards.
made = []

def socketfactory(connectR = 0, recvR = (), soerror = 0):
	del made[:]
	def skt(fam, stype, proto = 0):
		assert stype == socket.SOCK_STREAM
		s = FakeSocket(connectR, recvR, soerror)
		made.append(s)
		return s
	return skt

# select() that says everything is ready if the caller is willing to
# wait at least duration, and times out otherwise.
def selectfactory(duration):
	def slct(r, w, e, tmo):
		if tmo is None or tmo >= duration:
			return (r, w, [])
		else:
			return ([], [], [])
	return slct

# getaddrinfo() that resolves every name to the given addresses, except
# names starting with 'bad', which fail.
def addrinfofactory(ips = ('127.0.0.1',)):
	def gai(host, port, fam = 0, stype = 0):
		if host.startswith("bad"):
			raise socket.gaierror(socket.EAI_NONAME, "my error")
		return [(socket.AF_INET, socket.SOCK_STREAM, 6, '', (ip, port))
			for ip in ips]
	return gai

# A fake connection for idclient.query's dialer argument. It skips
# SafeSock entirely.
class FakeConn:
	def __init__(self, chunks = (), recverr = None, senderr = None):
		self.chunks = list(chunks)
		self.recverr = recverr
		self.senderr = senderr
		self.sent = b""
		self.deadline = None
		self.closed = False
	def setdeadline(self, wait):
		self.deadline = wait
	def send(self, data):
		if self.senderr:
			raise self.senderr
		self.sent = self.sent + data
		return len(data)
	def recv(self, n):
		if self.recverr:
			raise self.recverr
		if not self.chunks:
			return b""
		return self.chunks.pop(0)
	def close(self):
		self.closed = True

class FakeDialer:
	"""Hands out conn (or raises err) and remembers how it was called."""
	def __init__(self, conn = None, err = None):
		self.conn = conn
		self.err = err
		self.calls = []
	def __call__(self, host, port, timeout, bindaddr):
		self.calls.append((host, port, timeout, bindaddr))
		if self.err:
			raise self.err
		return self.conn

def replyconn(line):
	return FakeConn([line.encode("utf-8")])
