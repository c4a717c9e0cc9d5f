import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

from parkdown.__main__ import main, parse_arguments
from parkdown.peg import engine

class CommandLineTests(unittest.TestCase):
	def setUp(self) -> None:
		self.folder = tempfile.TemporaryDirectory()
		self.path = os.path.join(self.folder.name, 'test.md')
		self.write("# Hello\n\nWorld.\n")

	def tearDown(self) -> None:
		self.folder.cleanup()
		engine.VERBOSE = False

	def write(self, text):
		with open(self.path, 'w', encoding='utf-8') as fh: fh.write(text)

	def run_main(self, *argv):
		out, err = io.StringIO(), io.StringIO()
		with redirect_stdout(out), redirect_stderr(err):
			main(parse_arguments(list(argv)))
		return out.getvalue(), err.getvalue()

	def run_failing(self, *argv):
		out, err = io.StringIO(), io.StringIO()
		with self.assertRaises(SystemExit) as cm:
			with redirect_stdout(out), redirect_stderr(err):
				main(parse_arguments(list(argv)))
		self.assertEqual(1, cm.exception.code)
		return out.getvalue(), err.getvalue()

	def test_arguments(self):
		args = parse_arguments([])
		self.assertEqual('test.md', args.source_path)
		self.assertFalse(args.transform)
		self.assertEqual('file', args.rule)
		args = parse_arguments(['x.md', '-t', '-r', 'heading', '-v'])
		self.assertEqual(('x.md', True, 'heading', True), (args.source_path, args.transform, args.rule, args.verbose))

	def test_tokens(self):
		out, err = self.run_main(self.path)
		lines = out.splitlines()
		self.assertEqual("Parsing %s [16 chars, to TOKENS]:" % self.path, lines[0])
		self.assertEqual(['file', '  heading > h1 > text ["Hello"]', '  paragraph > text ["World."]'], lines[1:])
		self.assertEqual('', err)

	def test_transform(self):
		out, err = self.run_main(self.path, '--transform')
		self.assertIn("[16 chars, to HTML]", out)
		self.assertIn("<h1>Hello</h1>\n<p>World.</p>\n", out)

	def test_rule(self):
		self.write('```py { a: "b" } and so on')
		out, err = self.run_main(self.path, '-r', 'fence_defn')
		self.assertIn('  lang ["py"]', out)

	def test_verbose(self):
		out, err = self.run_main(self.path, '-v')
		self.assertTrue(engine.VERBOSE)
		self.assertIn("Rule 'file' matched", err)

	def test_parse_failure(self):
		self.write("<a>b</c>\n")
		with self.assertRaises(SystemExit) as cm:
			self.run_main(self.path, '-r', 'block_tag')
		self.assertEqual(1, cm.exception.code)

	def test_missing_file(self):
		with self.assertRaises(SystemExit) as cm:
			self.run_main(os.path.join(self.folder.name, 'nope.md'))
		self.assertEqual(1, cm.exception.code)

	def test_unknown_rule(self):
		out, err = self.run_failing(self.path, '-r', 'nonsense')
		self.assertEqual('', out)
		self.assertEqual("There is no rule called 'nonsense'.\n", err)

	def test_nesting_too_deep(self):
		depth = 10 * sys.getrecursionlimit()
		self.write('<a>'*depth + 'x' + '</a>'*depth + '\n')
		out, err = self.run_failing(self.path)
		self.assertIn("expected shallower nesting", err)


if __name__ == '__main__':
	unittest.main()
