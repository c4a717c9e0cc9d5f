"""
The expression algebra of parsing-expression grammars.

Each class here is one way to recognize text. An expression's `match(state, pos)`
method answers with the position just past what it matched, or None for failure.
Failure may leave the state dirty: whoever intends to carry on from a failed
attempt (ordered choice, repetition, lookahead, a rule call) is responsible for
restoring the snapshot it took beforehand. That rule keeps the common case cheap.

Expressions also answer two static questions which the grammar validator needs:
	is_nullable(nullable): can this match the empty string, given the set of rule names known to do so?
	leading(nullable): which rules might be called at the very position this expression starts?
Together those find left recursion before it finds the bottom of Python's stack.

At the end are a few lower-case helpers for writing grammars directly in Python.
They lift bare strings to literals, which keeps hand-written grammars readable.
"""

import re
from typing import Optional, Iterator

class Expression:
	""" Base class of PEG expression nodes. """
	def match(self, state, pos:int) -> Optional[int]:
		raise NotImplementedError(type(self))

	def is_nullable(self, nullable:set) -> bool:
		raise NotImplementedError(type(self))

	def leading(self, nullable:set) -> Iterator[str]:
		""" Rule names this might invoke without first consuming input. Terminals have none. """
		return iter(())

	def calls(self) -> Iterator[str]:
		""" Every rule name mentioned anywhere within. """
		return iter(())

	def unbounded_nullable(self, nullable:set) -> Iterator["Expression"]:
		""" Repetitions which could spin forever on the empty string. """
		return iter(())

### Terminals

class Literal(Expression):
	def __init__(self, text:str, insensitive=False):
		self.text, self.insensitive = text, insensitive
		self.folded = text.lower()
		self.width = len(text)
	def match(self, state, pos):
		if self.insensitive:
			found = state.text[pos:pos+self.width].lower() == self.folded
		else:
			found = state.text.startswith(self.text, pos)
		if found: return pos + self.width
		state.miss(str(self), pos)
	def is_nullable(self, nullable): return not self.text
	def __str__(self):
		return ('^' if self.insensitive else '') + quote(self.text)

class CharRange(Expression):
	def __init__(self, low:str, high:str):
		assert len(low) == len(high) == 1, (low, high)
		self.low, self.high = low, high
	def match(self, state, pos):
		if pos < state.size and self.low <= state.text[pos] <= self.high: return pos + 1
		state.miss(str(self), pos)
	def is_nullable(self, nullable): return False
	def __str__(self): return "%s..%s" % (quote(self.low, "'"), quote(self.high, "'"))

class Pattern(Expression):
	""" A labelled regular expression. Built-in character classes are made of these. """
	def __init__(self, label:str, regex:str):
		self.label = label
		self.regex = re.compile(regex)
	def match(self, state, pos):
		m = self.regex.match(state.text, pos)
		if m is not None: return m.end()
		state.miss(self.label, pos)
	def is_nullable(self, nullable): return self.regex.match('') is not None
	def __str__(self): return self.label

class AnyChar(Expression):
	def match(self, state, pos):
		if pos < state.size: return pos + 1
		state.miss('ANY', pos)
	def is_nullable(self, nullable): return False
	def __str__(self): return 'ANY'

class StartOfInput(Expression):
	def match(self, state, pos):
		if pos == 0: return pos
		state.miss('SOI', pos)
	def is_nullable(self, nullable): return True
	def __str__(self): return 'SOI'

class EndOfInput(Expression):
	def match(self, state, pos):
		if pos == state.size: return pos
		state.miss('EOI', pos)
	def is_nullable(self, nullable): return True
	def __str__(self): return 'EOI'

### Combinations

class Sequence(Expression):
	def __init__(self, items):
		self.items = tuple(items)
	def match(self, state, pos):
		for item in self.items:
			pos = item.match(state, pos)
			if pos is None: return None
		return pos
	def is_nullable(self, nullable): return all(item.is_nullable(nullable) for item in self.items)
	def leading(self, nullable):
		for item in self.items:
			yield from item.leading(nullable)
			if not item.is_nullable(nullable): break
	def calls(self):
		for item in self.items: yield from item.calls()
	def unbounded_nullable(self, nullable):
		for item in self.items: yield from item.unbounded_nullable(nullable)
	def __str__(self): return "(%s)" % " ~ ".join(map(str, self.items))

class Choice(Expression):
	""" Ordered choice: the first alternative to succeed wins, and the others are never consulted. """
	def __init__(self, alternatives):
		self.alternatives = tuple(alternatives)
	def match(self, state, pos):
		mark = state.save()
		for alternative in self.alternatives:
			end = alternative.match(state, pos)
			if end is not None: return end
			state.restore(mark)
		return None
	def is_nullable(self, nullable): return any(a.is_nullable(nullable) for a in self.alternatives)
	def leading(self, nullable):
		for a in self.alternatives: yield from a.leading(nullable)
	def calls(self):
		for a in self.alternatives: yield from a.calls()
	def unbounded_nullable(self, nullable):
		for a in self.alternatives: yield from a.unbounded_nullable(nullable)
	def __str__(self): return "(%s)" % " | ".join(map(str, self.alternatives))

class Repeat(Expression):
	""" Covers ? * + {n} {m,} {,n} {m,n} alike. A `high` of None means unbounded. """
	def __init__(self, item:Expression, low:int=0, high:Optional[int]=None):
		assert high is None or 0 <= low <= high, (low, high)
		self.item, self.low, self.high = item, low, high
	def match(self, state, pos):
		count = 0
		while self.high is None or count < self.high:
			mark = state.save()
			end = self.item.match(state, pos)
			if end is None:
				state.restore(mark)
				break
			if end == pos: return pos # Matching nothing once means matching nothing as often as required.
			count += 1
			pos = end
		return pos if count >= self.low else None
	def is_nullable(self, nullable): return self.low == 0 or self.item.is_nullable(nullable)
	def leading(self, nullable): return self.item.leading(nullable)
	def calls(self): return self.item.calls()
	def unbounded_nullable(self, nullable):
		if self.high is None and self.item.is_nullable(nullable): yield self
		yield from self.item.unbounded_nullable(nullable)
	def __str__(self):
		if (self.low, self.high) == (0, 1): suffix = '?'
		elif (self.low, self.high) == (0, None): suffix = '*'
		elif (self.low, self.high) == (1, None): suffix = '+'
		elif self.low == self.high: suffix = '{%d}' % self.low
		else: suffix = '{%s,%s}' % (self.low or '', '' if self.high is None else self.high)
		return str(self.item) + suffix

class Lookahead(Expression):
	""" &e and !e: peek without consuming anything, leaving neither events nor stack changes behind. """
	def __init__(self, item:Expression, positive:bool):
		self.item, self.positive = item, positive
	def match(self, state, pos):
		mark = state.save()
		state.predicates += 1
		try: found = self.item.match(state, pos) is not None
		finally: state.predicates -= 1
		state.restore(mark)
		return pos if found == self.positive else None
	def is_nullable(self, nullable): return True
	def leading(self, nullable): return self.item.leading(nullable)
	def calls(self): return self.item.calls()
	def unbounded_nullable(self, nullable): return self.item.unbounded_nullable(nullable)
	def __str__(self): return ('&' if self.positive else '!') + str(self.item)

class Call(Expression):
	""" A reference to a named rule. The state knows whether the rule is silent, atomic, or neither. """
	def __init__(self, name:str):
		self.name = name
	def match(self, state, pos): return state.call(self.name, pos)
	def is_nullable(self, nullable): return self.name in nullable
	def leading(self, nullable): yield self.name
	def calls(self): yield self.name
	def __str__(self): return self.name

### The stack: enough context-sensitivity to insist that a close-tag match its open-tag.

class Push(Expression):
	def __init__(self, item:Expression):
		self.item = item
	def match(self, state, pos):
		end = self.item.match(state, pos)
		if end is None: return None
		state.stack = state.stack + (state.text[pos:end],)
		return end
	def is_nullable(self, nullable): return self.item.is_nullable(nullable)
	def leading(self, nullable): return self.item.leading(nullable)
	def calls(self): return self.item.calls()
	def unbounded_nullable(self, nullable): return self.item.unbounded_nullable(nullable)
	def __str__(self): return "PUSH(%s)" % self.item

class Peek(Expression):
	""" Match whatever text was most recently pushed, without popping it. """
	pops = False
	def match(self, state, pos):
		if not state.stack:
			state.miss(str(self), pos)
			return None
		top = state.stack[-1]
		if not state.text.startswith(top, pos):
			state.miss(quote(top), pos)
			return None
		if self.pops: state.stack = state.stack[:-1]
		return pos + len(top)
	def is_nullable(self, nullable): return False
	def __str__(self): return 'PEEK'

class Pop(Peek):
	""" Match whatever text was most recently pushed, and pop it. """
	pops = True
	def __str__(self): return 'POP'

class Drop(Expression):
	""" Discard the top of the stack without matching anything. Fails on an empty stack. """
	def match(self, state, pos):
		if not state.stack: return None
		state.stack = state.stack[:-1]
		return pos
	def is_nullable(self, nullable): return True
	def __str__(self): return 'DROP'

ESCAPES = {'\n':r'\n', '\r':r'\r', '\t':r'\t', '\\':'\\\\', '\0':r'\0'}

def quote(text:str, mark='"') -> str:
	""" Display text the way the grammar notation would spell it. """
	body = ''.join(ESCAPES.get(c, '\\'+c if c == mark else c) for c in text)
	return mark + body + mark

BUILTINS = {
	'ANY': AnyChar(),
	'SOI': StartOfInput(),
	'EOI': EndOfInput(),
	'NEWLINE': Pattern('NEWLINE', r'\r\n|\n|\r'),
	'ASCII': Pattern('ASCII', r'[\x00-\x7f]'),
	'ASCII_DIGIT': Pattern('ASCII_DIGIT', r'[0-9]'),
	'ASCII_NONZERO_DIGIT': Pattern('ASCII_NONZERO_DIGIT', r'[1-9]'),
	'ASCII_HEX_DIGIT': Pattern('ASCII_HEX_DIGIT', r'[0-9A-Fa-f]'),
	'ASCII_ALPHA': Pattern('ASCII_ALPHA', r'[A-Za-z]'),
	'ASCII_ALPHA_LOWER': Pattern('ASCII_ALPHA_LOWER', r'[a-z]'),
	'ASCII_ALPHA_UPPER': Pattern('ASCII_ALPHA_UPPER', r'[A-Z]'),
	'ASCII_ALPHANUMERIC': Pattern('ASCII_ALPHANUMERIC', r'[A-Za-z0-9]'),
	'PEEK': Peek(),
	'POP': Pop(),
	'DROP': Drop(),
}

### Helpers for writing grammars in Python.

def lit(x) -> Expression:
	return Literal(x) if isinstance(x, str) else x

def ref(name:str) -> Expression:
	return BUILTINS[name] if name in BUILTINS else Call(name)

def seq(*items) -> Expression:
	return lit(items[0]) if len(items) == 1 else Sequence(map(lit, items))

def alt(*alternatives) -> Expression:
	return lit(alternatives[0]) if len(alternatives) == 1 else Choice(map(lit, alternatives))

def opt(*items) -> Expression: return Repeat(seq(*items), 0, 1)
def star(*items) -> Expression: return Repeat(seq(*items), 0, None)
def plus(*items) -> Expression: return Repeat(seq(*items), 1, None)
def ahead(*items) -> Expression: return Lookahead(seq(*items), True)
def neg(*items) -> Expression: return Lookahead(seq(*items), False)
