"""
The document pipeline: raw text, then a parse tree, then rendered output.

A Parkdown object goes through its stages exactly once, in order:

	INIT         content is loaded, nothing else has happened.
	PARSED       the grammar accepted the content; the tree and its root are available.
	TRANSFORMED  a renderer has walked the tree; the HTML is available (and still the tree).

Each operation knows which stages it makes sense in. Ask for something too early
(or try to repeat a step) and you get a ContractViolation: that's a bug in the calling
code, not a condition to recover from. There is no way back to an earlier stage;
make a new object to process new content.

A failed parse raises GrammarFailure and leaves the object at INIT.
"""

import enum
from typing import Optional

from . import markdown
from .arborist.trees import ParseTree, Node
from .rendering import HtmlRenderer
from .peg.interface import ContractViolation

class Stage(enum.Enum):
	INIT = 0
	PARSED = 1
	TRANSFORMED = 2

class Output(enum.Enum):
	HTML = 'html'
	TOKENS = 'tokens'

class Parkdown:
	def __init__(self, content:str, *, rule=None, filename:Optional[str]=None, grammar=None):
		self.content = content
		self.grammar = grammar or markdown.GRAMMAR
		self.rule = rule or self.grammar.rules.file
		self.filename = filename
		self.stage = Stage.INIT
		self.__tree = None
		self.__html = None

	@classmethod
	def from_file(cls, path:str, **kwargs) -> "Parkdown":
		with open(path, encoding='utf-8') as fh: content = fh.read()
		return cls(content, filename=path, **kwargs)

	@classmethod
	def with_rule(cls, rule, content:str, **kwargs) -> "Parkdown":
		return cls(content, rule=rule, **kwargs)

	def __require(self, operation, *stages):
		if self.stage not in stages: raise ContractViolation(operation, self.stage, stages)

	def parse(self) -> "Parkdown":
		self.__require('parse', Stage.INIT)
		self.__tree = self.grammar.parse(self.rule, self.content, filename=self.filename)
		self.stage = Stage.PARSED
		return self

	@property
	def tree(self) -> ParseTree:
		self.__require('tree', Stage.PARSED, Stage.TRANSFORMED)
		return self.__tree

	@property
	def root(self) -> Node:
		""" The sole top-level node. Raises a StructuralViolation if there isn't exactly one. """
		self.__require('root', Stage.PARSED, Stage.TRANSFORMED)
		return self.__tree.to_root()

	def transform(self, renderer=None) -> "Parkdown":
		"""
		Walk the tree with a renderer: any callable from a root Node to text.
		The default is the stock HtmlRenderer.
		"""
		self.__require('transform', Stage.PARSED)
		if renderer is None: renderer = HtmlRenderer()
		self.__html = renderer(self.root)
		self.stage = Stage.TRANSFORMED
		return self

	@property
	def html(self) -> str:
		self.__require('html', Stage.TRANSFORMED)
		return self.__html

	def tokens(self) -> str:
		""" The structural dump of the parse tree, as the describer draws it. """
		self.__require('tokens', Stage.PARSED, Stage.TRANSFORMED)
		return self.__tree.describe()

	def render(self, output:Output) -> str:
		""" Whichever output the caller selects; HTML needs the transform to have happened. """
		if output is Output.HTML: return self.html
		return self.tokens()
