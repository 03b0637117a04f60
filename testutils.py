#
# A tiny identd for tests that want real sockets. It listens on an
# ephemeral loopback port, answers one query with a canned reply, and
# remembers what it was asked.
import socket
import threading

class FakeIdentd(threading.Thread):
	def __init__(self, reply, host = '127.0.0.1'):
		threading.Thread.__init__(self)
		self.daemon = True
		self.reply = reply
		self.query = None
		self.peer = None
		self.lsock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		self.lsock.bind((host, 0))
		self.lsock.listen(1)
		self.lsock.settimeout(5)
		self.port = self.lsock.getsockname()[1]
	def run(self):
		try:
			s, self.peer = self.lsock.accept()
		except OSError:
			return
		try:
			s.settimeout(5)
			l = b""
			while b"\n" not in l:
				r = s.recv(100)
				if not r:
					break
				l = l + r
			self.query = l
			if self.reply is not None:
				s.sendall(self.reply)
		except OSError:
			pass
		finally:
			s.close()
	def finish(self):
		self.join(5)
		self.lsock.close()

# A listening socket that never accepts, for connect-without-answer
# tests. Whoever connects sits there until their timeout.
def silentlistener(host = '127.0.0.1'):
	s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
	s.bind((host, 0))
	s.listen(1)
	return s

# A port on loopback that nothing listens on.
def deadport(host = '127.0.0.1'):
	s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
	s.bind((host, 0))
	p = s.getsockname()[1]
	s.close()
	return p
