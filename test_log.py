#
# We have to shim syslog to check the important stuff.
import log
import io
import unittest

class testFilelogging(unittest.TestCase):
	def tearDown(self):
		log.usestderr()
		log.setprogname("identq")
		log.setdebuglevel(0)

	def testLogtofile(self):
		"Test logging to a StringIO file."
		si = io.StringIO()
		log.usestderr(si)
		log.setprogname("foobar")
		log.setdebuglevel(3)
		log.warn("string 1")
		log.report("string 2")
		log.debug(2, "string 3")
		log.debug(3, "string 4")
		log.debug(4, "string 5")
		self.assertEqual(si.getvalue(),
				 "foobar: string 1\nfoobar: string 2\nfoobar: debug: string 3\nfoobar: debug: string 4\n")

	def testDie(self):
		"Test that die logs and exits with the status it is given."
		si = io.StringIO()
		log.usestderr(si)
		try:
			log.die("goodbye", 4)
		except SystemExit as e:
			self.assertEqual(e.code, 4)
		else:
			self.fail("die did not exit")
		self.assertEqual(si.getvalue(), "identq: goodbye\n")

# String must not contain a \0.
def insistnonzero(lvl, s):
	if "\0" in s:
		raise KeyError("null in string")
class testSyslogging(unittest.TestCase):
	def setUp(self):
		self.osysl = log.syslog.syslog
		log.syslog.syslog = insistnonzero
	def tearDown(self):
		log.syslog.syslog = self.osysl
		log.usestderr()

	# We shim syslog.syslog so as to not explode over the actual syslog.
	def testSyslogNulls(self):
		"Test that attempting to syslog NULLs does not explode."
		log.usesyslog()
		log.warn("Should have these \0 nulls substituted \0 yep.")

	def testZapNulls(self):
		"Test that NULs are escaped and nothing else changes."
		self.assertEqual(log.zapnulls("a\0b"), "a\\0b")
		self.assertEqual(log.zapnulls("abc"), "abc")

if __name__ == "__main__":
	unittest.main()
