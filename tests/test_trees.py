import unittest

from parkdown.markdown import parse, Rule
from parkdown.arborist.trees import Node, Span
from parkdown.arborist.chains import RuleChainIndex
from parkdown.peg.interface import EmptyResult, MultipleRoots, StructuralViolation, GrammarFailure

DOC = """# One

Para with `code` and *more*.

## Two
"""

class ParseTreeTests(unittest.TestCase):
	def setUp(self) -> None:
		self.tree = parse(DOC)

	def test_basics(self):
		self.assertEqual(DOC, self.tree.text)
		self.assertEqual('file', self.tree.rule)
		self.assertEqual(len(self.tree), len(list(self.tree.nodes())))
		self.assertEqual([self.tree.to_root()], list(self.tree.roots()))

	def test_nodes_in_pre_order(self):
		names = [n.name for n in self.tree.nodes()]
		self.assertEqual(['file', 'heading', 'h1', 'text', 'paragraph'], names[:5])
		starts = [n.start for n in self.tree.nodes()]
		self.assertEqual(sorted(starts), starts)

	def test_several_roots(self):
		# A silent rule has no node of its own, so its children become the roots.
		tree = parse("a *b*", 'para_line')
		self.assertEqual(['text', 'emphasis'], [r.name for r in tree.roots()])
		with self.assertRaises(MultipleRoots) as cm:
			tree.to_root()
		self.assertEqual(2, cm.exception.count)
		self.assertIsInstance(cm.exception, StructuralViolation)
		self.assertNotIsInstance(cm.exception, GrammarFailure)

	def test_no_roots(self):
		tree = parse("\n", 'blank_line')
		self.assertEqual((), tree.roots())
		with self.assertRaises(EmptyResult):
			tree.to_root()

class NodeTests(unittest.TestCase):
	def setUp(self) -> None:
		self.tree = parse(DOC)
		self.root = self.tree.to_root()

	def test_identity(self):
		self.assertEqual(self.tree.node(0), self.root)
		self.assertEqual(hash(self.tree.node(0)), hash(self.root))
		self.assertNotEqual(self.tree.node(1), self.root)
		self.assertEqual({self.root}, {self.tree.node(0), self.tree.node(0)})

	def test_shape(self):
		self.assertIs(Rule.file, self.root.rule)
		self.assertEqual(Span(0, len(DOC)), self.root.span)
		self.assertEqual(len(DOC), self.root.span.width())
		self.assertEqual(['heading', 'paragraph', 'heading'], [c.name for c in self.root.children])
		self.assertTrue(self.root.has_children())
		leaf = next(self.root.leaves())
		self.assertTrue(leaf.is_leaf())
		self.assertEqual((), leaf.children)
		self.assertEqual(DOC[leaf.span.as_slice()], leaf.text)

	def test_queries(self):
		self.assertEqual(2, self.root.how_many(Rule.heading))
		self.assertEqual(2, self.root.how_many('heading'))
		self.assertEqual(len(self.root.get_rules(Rule.heading)), self.root.how_many(Rule.heading))
		self.assertTrue(self.root.has_rule(Rule.paragraph))
		self.assertFalse(self.root.has_rule(Rule.thematic_break))
		first, second = self.root.get_rules(Rule.heading)
		self.assertEqual(first, self.root.find_rule(Rule.heading))
		self.assertEqual('Two', second.find_chain(Rule.h2, Rule.text).text)
		self.assertIsNone(second.find_chain(Rule.h1, Rule.text))
		self.assertEqual('code', self.root.find_chain('paragraph', 'code_span', 'code_text').text)

	def test_get_rule_text_concatenates(self):
		para = self.root.find_rule(Rule.paragraph)
		self.assertEqual('Para with  and .', para.get_rule_text(Rule.text))
		self.assertEqual('', para.get_rule_text(Rule.strong))

	def test_index_is_built_once_and_cached(self):
		para = self.root.find_rule(Rule.paragraph)
		self.assertIsNone(para.record.chain)
		index = para.chain()
		self.assertIsInstance(index, RuleChainIndex)
		self.assertIs(index, para.chain())
		self.assertIs(index, Node(self.tree, para.index).chain())
		self.assertEqual(['text', 'code_span', 'emphasis'], index.names())
		self.assertEqual(len(para.children), len(index))

	def test_descendants(self):
		texts = [n.text for n in self.root.descendants(Rule.text)]
		self.assertEqual(['One', 'Para with ', ' and ', 'more', '.', 'Two'], texts)
		self.assertEqual(len(self.tree) - 1, len(list(self.root.descendants())))

	def test_segments(self):
		h1 = self.root.find_chain(Rule.heading, Rule.h1)
		parts = [(None if part is None else part.name, text) for part, text in h1.segments()]
		self.assertEqual([(None, '# '), ('text', 'One'), (None, '\n')], parts)

	def test_fragments_reproduce_text(self):
		for node in self.tree.nodes():
			self.assertEqual(node.text, ''.join(text for part, text in node.fragments()))
		self.assertTrue(all(part is None or part.is_leaf() for part, text in self.root.fragments()))

class RuleChainIndexTests(unittest.TestCase):
	def test_lookup(self):
		index = RuleChainIndex([('a', 1), ('b', 2), ('a', 5)])
		self.assertEqual((1, 5), index.lookup('a'))
		self.assertEqual((), index.lookup('z'))
		self.assertEqual(2, index.first('b'))
		self.assertIsNone(index.first('z'))
		self.assertEqual(2, index.count('a'))
		self.assertEqual(0, index.count('z'))
		self.assertEqual(['a', 'b'], index.names())
		self.assertIn('b', index)
		self.assertNotIn('z', index)
		self.assertEqual(3, len(index))


if __name__ == '__main__':
	unittest.main()
