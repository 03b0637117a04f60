#
import util
import unittest

class Oops(Exception):
	pass

class testIntOrRaise(unittest.TestCase):
	def testGood(self):
		"Test that integers convert."
		self.assertEqual(util.int_or_raise("10", Oops), 10)
		self.assertEqual(util.int_or_raise("-3", Oops), -3)
	def testBad(self):
		"Test that non-integers raise the error we were given."
		self.assertRaises(Oops, util.int_or_raise, "abc", Oops)
		self.assertRaises(Oops, util.int_or_raise, "1.5", Oops)
		self.assertRaises(Oops, util.int_or_raise, "", Oops)

class testPortOrRaise(unittest.TestCase):
	knownValues = (
		('0', 0),
		('113', 113),
		('65535', 65535),
		('65536', None),
		('-1', None),
		('ident', None),
		)
	def testPorts(self):
		"Test util.port_or_raise() with known values."
		for i, j in self.knownValues:
			if j is None:
				self.assertRaises(Oops, util.port_or_raise, i, Oops)
			else:
				self.assertEqual(util.port_or_raise(i, Oops), j)

class testGetSecs(unittest.TestCase):
	knownValues = (
		('10', 10),
		('0.5', 0.5),
		('10s', 10),
		('1.5s', 1.5),
		('2m', 120),
		('1h', 3600),
		('0', 0),
		('5.', 5),
		)
	knownBad = (
		'',
		's',
		'abc',
		'10d',
		'10x',
		'-1s',
		'1.2.3s',
		)
	def testKnownValues(self):
		"Test that known durations come out as the right number of seconds."
		for i, j in self.knownValues:
			self.assertEqual(util.getsecs_or_raise(i, Oops), j,
					 "bad result at " + i)
	def testKnownBad(self):
		"Test that bad durations raise the error we were given."
		for i in self.knownBad:
			self.assertRaises(Oops, util.getsecs_or_raise, i, Oops)

if __name__ == "__main__":
	unittest.main()
