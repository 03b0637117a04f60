#
# Messages from the identq command. (The idclient module itself never
# logs; it raises exceptions and lets its callers decide.)
#

import sys
import syslog

# Where messages go: a file (normally stderr) or syslog.
class StderrLog:
	def __init__(self, fp):
		self.fp = fp
	# Never close self.fp; it is usually sys.stderr.
	def close(self):
		self.fp.flush()
		self.fp = None
	def log(self, lvl, msg):
		if lvl == syslog.LOG_DEBUG:
			self.fp.write("%s: debug: %s\n" % (progname, msg))
		else:
			self.fp.write("%s: %s\n" % (progname, msg))
# identd replies can carry anything, including NULs, and syslog
# truncates at the first one.
def zapnulls(s):
	if "\0" not in s:
		return s
	return "\\0".join(s.split("\0"))
class SyslogLog:
	def __init__(self, ident, facil):
		syslog.openlog(ident, syslog.LOG_PID, facil)
	def close(self):
		syslog.closelog()
	def log(self, lvl, msg):
		syslog.syslog(lvl, zapnulls(msg))

# Global logging state lives here rather than on the logger object,
# because usestderr() and usesyslog() replace the logger.
debuglevel = 0
progname = "identq"
logger = StderrLog(sys.stderr)

def setprogname(newname):
	global progname
	progname = newname
def setdebuglevel(lvl):
	global debuglevel
	debuglevel = lvl
def usestderr(fp = None):
	global logger
	if fp is None:
		fp = sys.stderr
	logger.close()
	logger = StderrLog(fp)
def usesyslog(facil = None):
	global logger
	if facil is None:
		facil = syslog.LOG_USER
	logger.close()
	logger = SyslogLog(progname, facil)

def die(msg, status = 1):
	logger.log(syslog.LOG_ALERT, msg)
	sys.exit(status)
def warn(msg):
	logger.log(syslog.LOG_WARNING, msg)
def error(msg):
	logger.log(syslog.LOG_ERR, msg)
def report(msg):
	logger.log(syslog.LOG_INFO, msg)
def debug(lvl, msg):
	if debuglevel < lvl:
		return
	logger.log(syslog.LOG_DEBUG, msg)
