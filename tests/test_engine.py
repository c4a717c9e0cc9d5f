import sys
import unittest

from parkdown.peg.expressions import Push, Repeat, lit, ref, seq, alt, opt, star, plus, neg
from parkdown.peg.grammar import Grammar
from parkdown.peg.interface import DefinitionError, GrammarFailure, TOO_DEEP

def words_grammar():
	g = Grammar('words')
	g.define('pair', seq(ref('word'), ' ', ref('word')))
	g.define('either', alt(seq(ref('word'), '!'), seq(ref('word'), '?')))
	g.define('list', seq(ref('number'), star(ref('sep'), ref('number'))))
	g.define('sep', seq(',', opt(' ')), silent=True)
	g.define('word', plus(ref('ASCII_ALPHA')), atomic=True)
	g.define('number', plus(ref('ASCII_DIGIT')), atomic=True)
	g.define('run', Repeat(lit('a'), 2, 3))
	g.define('not_a', seq(neg('a'), ref('ANY')))
	return g

class MatchingTests(unittest.TestCase):
	def setUp(self) -> None:
		self.g = words_grammar()

	def test_sequence(self):
		root = self.g.parse('pair', 'hello world').to_root()
		self.assertEqual('pair', root.name)
		self.assertEqual(['hello', 'world'], [c.text for c in root.children])

	def test_backtracking_discards_events(self):
		tree = self.g.parse('either', 'hi?')
		# The first alternative matched a word before failing; that event must be gone.
		self.assertEqual(2, len(tree))
		self.assertEqual(['word'], [c.name for c in tree.to_root().children])

	def test_silent_rules_make_no_events(self):
		root = self.g.parse('list', '1, 22,333').to_root()
		self.assertEqual(['1', '22', '333'], [c.text for c in root.children])
		self.assertEqual({'number'}, {c.name for c in root.children})

	def test_atomic_rules_hide_their_insides(self):
		root = self.g.parse('pair', 'ab cd').to_root()
		for child in root.children:
			self.assertTrue(child.is_leaf())

	def test_bounded_repetition(self):
		self.assertEqual(3, self.g.parse('run', 'aaaa').to_root().end)
		self.assertEqual(2, self.g.parse('run', 'aab').to_root().end)
		with self.assertRaises(GrammarFailure):
			self.g.parse('run', 'ab')

	def test_prefix_match_is_enough(self):
		root = self.g.parse('pair', 'ab cd and more').to_root()
		self.assertEqual('ab cd', root.text)

	def test_rules_enumeration(self):
		rules = self.g.rules
		self.assertIs(rules.word, rules['word'])
		self.assertNotIn('sep', rules.__members__)
		self.assertEqual(rules.pair, self.g.parse(rules.pair, 'a b').to_root().rule)

class FailureTests(unittest.TestCase):
	def test_expected_set_at_furthest_position(self):
		g = Grammar()
		g.define('greeting', seq('hello', ' ', alt('world', 'there')))
		with self.assertRaises(GrammarFailure) as cm:
			g.parse('greeting', 'hello you')
		self.assertEqual('greeting', cm.exception.rule)
		self.assertEqual(6, cm.exception.position)
		self.assertEqual(('"there"', '"world"'), cm.exception.expected)
		self.assertIn('expected one of "there", "world"', str(cm.exception))
		self.assertIn('column 7', str(cm.exception))

	def test_atomic_failure_reports_the_rule(self):
		with self.assertRaises(GrammarFailure) as cm:
			words_grammar().parse('pair', 'hello 123')
		self.assertEqual(6, cm.exception.position)
		self.assertEqual(('word',), cm.exception.expected)

	def test_lookahead_records_nothing(self):
		g = words_grammar()
		self.assertEqual('b', g.parse('not_a', 'b').to_root().text)
		with self.assertRaises(GrammarFailure) as cm:
			g.parse('not_a', 'a')
		self.assertEqual((), cm.exception.expected)
		self.assertEqual("no way to continue", cm.exception.expectation())

	def test_nesting_too_deep(self):
		g = Grammar()
		g.define('nest', alt(seq('(', ref('nest'), ')'), 'x'))
		self.assertEqual(3, len(g.parse('nest', '((x))')))
		depth = 10 * sys.getrecursionlimit()
		with self.assertRaises(GrammarFailure) as cm:
			g.parse('nest', '('*depth + 'x' + ')'*depth)
		self.assertEqual((TOO_DEEP,), cm.exception.expected)
		self.assertEqual('nest', cm.exception.rule)
		self.assertLess(0, cm.exception.position)
		self.assertLess(cm.exception.position, depth)
		self.assertIn('expected shallower nesting', str(cm.exception))

class StackTests(unittest.TestCase):
	def setUp(self) -> None:
		g = Grammar('stack')
		g.define('element', seq('<', Push(ref('name')), '>', star(neg('</'), ref('ANY')), '</', ref('POP'), '>'))
		g.define('either', alt(seq(Push(ref('name')), '!'), seq(ref('name'), ':', ref('POP'))))
		g.define('twice', seq(Push(ref('name')), '-', ref('PEEK'), '-', ref('POP'), ref('EOI')))
		g.define('name', plus(ref('ASCII_ALPHA')), atomic=True)
		self.g = g

	def test_matching_close(self):
		self.assertEqual('<a>x y</a>', self.g.parse('element', '<a>x y</a>').to_root().text)

	def test_mismatched_close(self):
		with self.assertRaises(GrammarFailure) as cm:
			self.g.parse('element', '<a>x</b>')
		self.assertEqual(6, cm.exception.position)
		self.assertEqual(('"a"',), cm.exception.expected)

	def test_backtracking_restores_stack(self):
		# If the first alternative's PUSH survived its failure, POP would match "ab" here.
		with self.assertRaises(GrammarFailure):
			self.g.parse('either', 'ab:ab')

	def test_peek_leaves_stack_alone(self):
		self.g.parse('twice', 'ab-ab-ab')
		with self.assertRaises(GrammarFailure):
			self.g.parse('twice', 'ab-ab-')

class ValidationTests(unittest.TestCase):
	def test_undefined_rule(self):
		g = Grammar()
		g.define('a', seq('x', ref('nope')))
		with self.assertRaises(DefinitionError):
			g.validate()

	def test_duplicate_rule(self):
		g = Grammar()
		g.define('a', lit('x'))
		with self.assertRaises(DefinitionError):
			g.define('a', lit('y'))

	def test_direct_left_recursion(self):
		g = Grammar()
		g.define('expr', alt(seq(ref('expr'), '+', ref('num')), ref('num')))
		g.define('num', plus(ref('ASCII_DIGIT')))
		with self.assertRaises(DefinitionError):
			g.validate()

	def test_left_recursion_through_nullable_prefix(self):
		g = Grammar()
		g.define('a', seq(opt('x'), ref('b')))
		g.define('b', seq(ref('a'), 'y'))
		with self.assertRaises(DefinitionError) as cm:
			g.validate()
		self.assertIn('a, b', str(cm.exception))

	def test_right_recursion_is_fine(self):
		g = Grammar()
		g.define('nest', alt(seq('(', ref('nest'), ')'), lit('x')))
		self.assertEqual('((x))', g.parse('nest', '((x))').to_root().text)

	def test_nullable_repetition(self):
		g = Grammar()
		g.define('a', star(opt('x')))
		with self.assertRaises(DefinitionError):
			g.validate()

	def test_nullable_through_rule(self):
		g = Grammar()
		g.define('a', plus(ref('b')))
		g.define('b', star('x'))
		with self.assertRaises(DefinitionError):
			g.validate()

	def test_frozen_after_use(self):
		g = Grammar()
		g.define('a', lit('x'))
		g.parse('a', 'x')
		with self.assertRaises(AssertionError):
			g.define('b', lit('y'))

	def test_unknown_start_rule(self):
		g = Grammar()
		g.define('a', lit('x'))
		with self.assertRaises(KeyError):
			g.parse('b', 'x')


if __name__ == '__main__':
	unittest.main()
