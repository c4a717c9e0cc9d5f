"""
Parkdown: a markdown-like document language, defined by a PEG grammar.

The grammar text is right here in MARKDOWN_PEG, in the notation the metagrammar module reads.
It covers headings, thematic breaks, fenced code with a language and a brace-delimited
attribute list, block and inline HTML-ish tags (with close-tags checked against open-tags),
paragraphs, and a few inline forms. It is not CommonMark and does not try to be.

Rule names are the vocabulary of the parse tree. The non-silent ones are available as
members of `Rule`, so that typos in queries fail loudly: `Rule.fence_defn`, `Rule.lang`, etc.
"""

from typing import Optional

from .peg.metagrammar import compile_grammar
from .arborist.trees import ParseTree, Node

MARKDOWN_PEG = r"""
// Blocks.

file = { SOI ~ blank_line* ~ (block ~ blank_line*)* ~ space* ~ EOI }
block = _{ heading | thematic_break | fenced_code | html_block | paragraph }

heading = { h1 | h2 | h3 | h4 | h5 | h6 }
h1 = { indent ~ "#" ~ space+ ~ inline+ ~ line_end }
h2 = { indent ~ "##" ~ space+ ~ inline+ ~ line_end }
h3 = { indent ~ "###" ~ space+ ~ inline+ ~ line_end }
h4 = { indent ~ "####" ~ space+ ~ inline+ ~ line_end }
h5 = { indent ~ "#####" ~ space+ ~ inline+ ~ line_end }
h6 = { indent ~ "######" ~ space+ ~ inline+ ~ line_end }

thematic_break = { indent ~ (dash_break | star_break | underscore_break) ~ space* ~ line_end }
dash_break = _{ "-" ~ space* ~ "-" ~ space* ~ "-" ~ (space* ~ "-")* }
star_break = _{ "*" ~ space* ~ "*" ~ space* ~ "*" ~ (space* ~ "*")* }
underscore_break = _{ "_" ~ space* ~ "_" ~ space* ~ "_" ~ (space* ~ "_")* }

fenced_code = { indent ~ fence_defn ~ NEWLINE ~ code ~ fence_close }
fence_defn = { "```" ~ space* ~ lang? ~ space* ~ fence_attrs? ~ junk }
lang = @{ ASCII_ALPHA ~ (ASCII_ALPHANUMERIC | "_" | "-" | "+" | "#" | ".")* }
fence_attrs = { "{" ~ ws* ~ (fence_attr ~ (ws* ~ "," ~ ws* ~ fence_attr)* ~ (ws* ~ ",")?)? ~ ws* ~ "}" }
fence_attr = { attr_name ~ ws* ~ ":" ~ ws* ~ "\"" ~ attr_value ~ "\"" }
// Whatever else follows on the opening line of a fence is tolerated, and ignored.
junk = _{ (!NEWLINE ~ ANY)* }
code = @{ (!fence_close ~ (!NEWLINE ~ ANY)* ~ NEWLINE)* }
fence_close = _{ indent ~ "```" ~ space* ~ line_end }

html_block = { indent ~ (block_tag | tag) ~ space* ~ line_end }

paragraph = { para_line ~ (NEWLINE ~ !interrupt ~ para_line)* ~ line_end }
para_line = _{ space* ~ inline+ }
interrupt = _{ blank_line | heading | thematic_break | indent ~ "```" | html_block }

// Inlines.

inline = _{ code_span | strong | emphasis | tag | block_tag | text }
code_span = { "`" ~ code_text ~ "`" }
code_text = @{ (!("`" | NEWLINE) ~ ANY)+ }
strong = { "**" ~ (!"**" ~ inline)+ ~ "**" }
emphasis = { "*" ~ !(space | "*") ~ (!"*" ~ inline)+ ~ "*" }
text = @{ (!NEWLINE ~ ANY) ~ (!(NEWLINE | "`" | "*" | "<") ~ ANY)* }

// Tags. A block tag's close-tag must name the same element as its open-tag.

tag = { "<" ~ tag_name ~ attrs? ~ ws* ~ "/>" }
block_tag = { "<" ~ PUSH(tag_name) ~ attrs? ~ ws* ~ ">" ~ content ~ "</" ~ POP ~ ws* ~ ">" }
content = { (block_tag | tag | tag_text)* }
tag_text = @{ (!("<" ~ ("/" | ASCII_ALPHA)) ~ ANY)+ }
tag_name = @{ ASCII_ALPHA ~ (ASCII_ALPHANUMERIC | "-" | "_" | ".")* }
attrs = { ws* ~ attr ~ (ws+ ~ attr)* ~ ws* }
attr = { attr_name ~ ws* ~ "=" ~ ws* ~ "\"" ~ attr_value ~ "\"" }
attr_name = @{ (ASCII_ALPHA | "_" | "@") ~ (ASCII_ALPHANUMERIC | "-" | "_" | ".")* }
attr_value = @{ (!"\"" ~ ANY)* }

// Lexical odds and ends.

space = _{ " " | "\t" }
ws = _{ " " | "\t" | NEWLINE }
blank_line = _{ space* ~ NEWLINE }
line_end = _{ NEWLINE | EOI }
indent = _{ " "{0,3} }
"""

GRAMMAR = compile_grammar(MARKDOWN_PEG, name='Parkdown', filename='markdown.peg')
Rule = GRAMMAR.rules

HEADING_LEVELS = {'h%d'%n: n for n in range(1, 7)}

def parse(text:str, rule=Rule.file, *, filename:Optional[str]=None) -> ParseTree:
	"""
	Parse text as Parkdown, starting from any rule you like. The default rule
	insists on consuming the whole document; the others need only match a prefix.
	Raises GrammarFailure if the text doesn't fit.
	"""
	return GRAMMAR.parse(rule, text, filename=filename)

def heading_level(node:Node) -> Optional[int]:
	""" 1 through 6 for a heading (or one of its h1...h6 children), otherwise None. """
	if node.name in HEADING_LEVELS: return HEADING_LEVELS[node.name]
	if node.name == 'heading':
		for child in node.children: return HEADING_LEVELS.get(child.name)
	return None

def heading_text(node:Node) -> str:
	""" The inline content of a heading, as written, without the leading marks or trailing space. """
	if node.name == 'heading': node = node.children[0]
	children = node.children
	if not children: return ''
	return node.tree.text[children[0].start:children[-1].end].rstrip()

def attributes(node:Node) -> dict:
	"""
	Name-to-value mapping of the attributes on a tag, a block tag, a fenced code block,
	or directly on an `attrs` or `fence_attrs` node. Absent attributes make an empty dict.
	Values are taken as written; no entity decoding happens here.
	"""
	if node.name in ('attrs', 'fence_attrs'): container = node
	elif node.name == 'fenced_code': container = node.find_chain(Rule.fence_defn, Rule.fence_attrs)
	elif node.name == 'fence_defn': container = node.find_rule(Rule.fence_attrs)
	else: container = node.find_rule(Rule.attrs)
	if container is None: return {}
	pairs = container.get_rules(Rule.attr) + container.get_rules(Rule.fence_attr)
	return {pair.get_rule_text(Rule.attr_name): pair.get_rule_text(Rule.attr_value) for pair in pairs}
