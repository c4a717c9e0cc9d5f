r"""
How to read a grammar written as text, when all you have is a grammar engine.

The notation is much like that of the Rust "pest" crate, because it's pleasant:

	name = { expression }     // an ordinary rule: it makes a node in the tree.
	name = _{ expression }    // a silent rule: its children (if any) attach to its caller.
	name = @{ expression }    // an atomic rule: one node, with nothing visible inside.

	a ~ b       sequence                 a | b       ordered choice
	&a  !a      lookahead                a? a* a+    the usual
	a{3} a{2,} a{,4} a{2,4}              bounded repetition
	"text"      literal, with \n \r \t \0 \\ \" \' \xHH \u{HHHH} escapes
	^"text"     case-insensitive literal
	'a'  'a'..'z'                        a character, a range of characters
	PUSH(a)  POP  PEEK  DROP             a stack of matched text, for matching close-tags to open-tags
	ANY SOI EOI NEWLINE ASCII_ALPHA ...  built-ins

The metagrammar for that notation is written below with the Python helpers from the
expressions module. Parsing a grammar text with it yields an ordinary parse tree, and
compiling that tree back into expressions is a walk through the rule-chain index. So
the first real customer of the tree-query layer is the grammar engine itself.
"""

import re
import warnings

from .expressions import (
	Expression, Literal, CharRange, Sequence, Choice, Repeat, Lookahead, Call, Push,
	BUILTINS, lit, ref, seq, alt, opt, star, plus, neg,
)
from .grammar import Grammar
from .interface import DefinitionError, GrammarFailure, SILENT_MARK, ATOMIC_MARK

META = Grammar('PEG Metagrammar')
SKIP = ref('skip')

META.define('grammar', seq(ref('SOI'), SKIP, star(ref('definition'), SKIP), ref('EOI')))
META.define('skip', star(alt(' ', '\t', ref('NEWLINE'), ref('comment'))), silent=True)
META.define('comment', seq('//', star(neg(ref('NEWLINE')), ref('ANY'))), silent=True)
META.define('definition', seq(ref('identifier'), SKIP, '=', SKIP, opt(ref('modifier')), '{', SKIP, ref('choice'), SKIP, '}'))
META.define('modifier', alt(SILENT_MARK, ATOMIC_MARK), atomic=True)

META.define('choice', seq(ref('sequence'), star(SKIP, '|', SKIP, ref('sequence'))))
META.define('sequence', seq(ref('term'), star(SKIP, '~', SKIP, ref('term'))))
META.define('term', seq(star(ref('prefix'), SKIP), ref('primary'), star(SKIP, ref('postfix'))))

META.define('prefix', alt(ref('positive'), ref('negative')), silent=True)
META.define('positive', lit('&'))
META.define('negative', lit('!'))

META.define('postfix', alt(ref('optional'), ref('zero_or_more'), ref('one_or_more'), ref('repeat_exact'), ref('repeat_range')), silent=True)
META.define('optional', lit('?'))
META.define('zero_or_more', lit('*'))
META.define('one_or_more', lit('+'))
META.define('repeat_exact', seq('{', SKIP, ref('number'), SKIP, '}'))
META.define('repeat_range', seq('{', SKIP, opt(ref('lower')), SKIP, ',', SKIP, opt(ref('upper')), SKIP, '}'))
for _bound in ('number', 'lower', 'upper'):
	META.define(_bound, plus(ref('ASCII_DIGIT')), atomic=True)

META.define('primary', alt(
	seq('(', SKIP, ref('choice'), SKIP, ')'),
	ref('push'),
	ref('stack_op'),
	ref('insensitive'),
	ref('string'),
	ref('range'),
	ref('character'),
	ref('identifier'),
), silent=True)
META.define('push', seq('PUSH', SKIP, '(', SKIP, ref('choice'), SKIP, ')'))
META.define('stack_op', seq(alt('POP', 'PEEK', 'DROP'), neg(ref('ident_char'))), atomic=True)
META.define('identifier', seq(alt('_', ref('ASCII_ALPHA')), star(ref('ident_char'))), atomic=True)
META.define('ident_char', alt('_', ref('ASCII_ALPHANUMERIC')), silent=True)

META.define('insensitive', seq('^', ref('string')))
META.define('string', seq('"', ref('string_body'), '"'))
META.define('string_body', star(alt(ref('escape'), seq(neg(alt('"', '\\')), ref('ANY')))), atomic=True)
META.define('range', seq("'", ref('char'), "'", SKIP, '..', SKIP, "'", ref('char'), "'"))
META.define('character', seq("'", ref('char'), "'"))
META.define('char', alt(ref('escape'), seq(neg("'"), ref('ANY'))), atomic=True)
META.define('escape', seq('\\', alt(
	seq('u{', plus(ref('ASCII_HEX_DIGIT')), '}'),
	seq('x', ref('ASCII_HEX_DIGIT'), ref('ASCII_HEX_DIGIT')),
	ref('ANY'),
)), silent=True)

SIMPLE_ESCAPES = {'n':'\n', 'r':'\r', 't':'\t', '0':'\0', '\\':'\\', '"':'"', "'":"'"}
ESCAPE_PATTERN = re.compile(r'\\(u\{([0-9A-Fa-f]+)\}|x([0-9A-Fa-f]{2})|.)', re.DOTALL)

PREFIXES = {'positive': True, 'negative': False}
POSTFIXES = {'optional', 'zero_or_more', 'one_or_more', 'repeat_exact', 'repeat_range'}

class _Compiler:
	""" Turns metagrammar parse-tree nodes into expressions. Dispatches on rule name. """
	def __init__(self, source, names:set):
		self.source = source
		self.names = names

	def complain(self, node, message) -> DefinitionError:
		return DefinitionError(self.source.complaint(node.span.as_slice(), message))

	def __call__(self, node) -> Expression:
		return getattr(self, 'compile_'+node.name)(node)

	def compile_choice(self, node):
		alternatives = [self(s) for s in node.get_rules('sequence')]
		return alternatives[0] if len(alternatives) == 1 else Choice(alternatives)

	def compile_sequence(self, node):
		terms = [self(t) for t in node.get_rules('term')]
		return terms[0] if len(terms) == 1 else Sequence(terms)

	def compile_term(self, node):
		# Postfix operators bind tighter than prefix operators: !a* means !(a*).
		prefixes, expression = [], None
		for child in node.children:
			if child.name in PREFIXES: prefixes.append(PREFIXES[child.name])
			elif child.name in POSTFIXES: expression = self.repetition(child, expression)
			else: expression = self(child)
		for positive in reversed(prefixes):
			expression = Lookahead(expression, positive)
		return expression

	def repetition(self, node, item):
		if node.name == 'optional': return Repeat(item, 0, 1)
		if node.name == 'zero_or_more': return Repeat(item, 0, None)
		if node.name == 'one_or_more': return Repeat(item, 1, None)
		if node.name == 'repeat_exact':
			count = int(node.get_rule_text('number'))
			return Repeat(item, count, count)
		low = int(node.get_rule_text('lower') or 0)
		high = int(node.get_rule_text('upper')) if node.has_rule('upper') else None
		if high is not None and high < low: raise self.complain(node, "Repetition bounds are backwards.")
		return Repeat(item, low, high)

	def compile_push(self, node):
		return Push(self(node.find_rule('choice')))

	def compile_stack_op(self, node):
		return BUILTINS[node.text]

	def compile_string(self, node):
		return Literal(self.unescape(node.find_rule('string_body')))

	def compile_insensitive(self, node):
		return Literal(self.unescape(node.find_chain('string', 'string_body')), insensitive=True)

	def compile_character(self, node):
		return Literal(self.unescape(node.find_rule('char')))

	def compile_range(self, node):
		low, high = [self.unescape(c) for c in node.get_rules('char')]
		if high < low: raise self.complain(node, "Character range is backwards.")
		return CharRange(low, high)

	def compile_identifier(self, node):
		name = node.text
		if name in self.names: return Call(name)
		if name in BUILTINS: return BUILTINS[name]
		raise self.complain(node, "Undefined rule %r."%name)

	def unescape(self, node) -> str:
		def decode(m):
			if m.group(2): return chr(int(m.group(2), 16))
			if m.group(3): return chr(int(m.group(3), 16))
			try: return SIMPLE_ESCAPES[m.group(1)]
			except KeyError:
				raise self.complain(node, "Unknown escape sequence %r."%m.group()) from None
		return ESCAPE_PATTERN.sub(decode, node.text)

def compile_grammar(text:str, *, name:str=None, filename:str=None) -> Grammar:
	"""
	Read a grammar in the notation described above, check it over, and return it ready to use.
	Any problem, from a syntax error to left recursion, comes out as a DefinitionError.
	"""
	try: tree = META.parse('grammar', text, filename=filename)
	except GrammarFailure as failure: raise DefinitionError(str(failure)) from None
	definitions = tree.to_root().get_rules('definition')
	names = [d.get_rule_text('identifier') for d in definitions]
	compiler = _Compiler(tree.source, set(names))
	grammar = Grammar(name or filename or 'PEG Grammar')
	for node, rule in zip(definitions, names):
		if rule in grammar: raise compiler.complain(node.find_rule('identifier'), "Rule %r is defined twice."%rule)
		row, col = tree.source.find_row_col(node.start)
		if rule in BUILTINS: warnings.warn("Line %d: rule %r shadows the built-in of the same name."%(row, rule))
		modifier = node.get_rule_text('modifier')
		grammar.define(
			rule, compiler(node.find_rule('choice')),
			silent=modifier == SILENT_MARK,
			atomic=modifier == ATOMIC_MARK,
			provenance=row,
		)
	grammar.validate()
	return grammar
