"""
Turn a Parkdown parse tree into HTML.

The renderer is a visitor over nodes which dispatches on the rule name: a node
for rule `foo` goes to `render_foo(node)`, and any rule without a method of its own
just renders its children one after the other. Subclass and override to taste.

No attempt is made at sanitization. Text is escaped; tags written in the document
come out as tags, with their attribute values re-escaped.
"""

from html import escape

from .arborist.trees import Node
from .markdown import Rule, heading_level, attributes

class HtmlRenderer:
	def render(self, node:Node) -> str:
		try: method = getattr(self, 'render_' + node.name)
		except AttributeError: method = self.render_children
		return method(node)

	__call__ = render

	def render_children(self, node:Node) -> str:
		return ''.join(self.render(child) for child in node.children)

	def render_inline(self, node:Node) -> str:
		""" Children, plus whatever text lies between them (line breaks and the like), escaped. """
		parts = []
		for child, text in node.segments():
			parts.append(escape(text, quote=False) if child is None else self.render(child))
		return ''.join(parts).strip()

	def render_file(self, node:Node) -> str:
		return ''.join(self.render(block) + "\n" for block in node.children)

	def render_heading(self, node:Node) -> str:
		level = heading_level(node)
		return "<h%d>%s</h%d>" % (level, self.render_children(node.children[0]), level)

	def render_paragraph(self, node:Node) -> str:
		return "<p>%s</p>" % self.render_inline(node)

	def render_thematic_break(self, node:Node) -> str:
		return "<hr />"

	def render_fenced_code(self, node:Node) -> str:
		lang = node.find_chain(Rule.fence_defn, Rule.lang)
		props = {} if lang is None else {'class': 'language-' + lang.text}
		for key, value in attributes(node).items(): props['data-' + key] = value
		code = node.get_rule_text(Rule.code)
		return "<pre><code%s>%s</code></pre>" % (format_attributes(props), escape(code, quote=False))

	def render_tag(self, node:Node) -> str:
		return "<%s%s />" % (node.get_rule_text(Rule.tag_name), format_attributes(attributes(node)))

	def render_block_tag(self, node:Node) -> str:
		name = node.get_rule_text(Rule.tag_name)
		inner = self.render_children(node.find_rule(Rule.content))
		return "<%s%s>%s</%s>" % (name, format_attributes(attributes(node)), inner, name)

	def render_tag_text(self, node:Node) -> str: return escape(node.text, quote=False)
	def render_text(self, node:Node) -> str: return escape(node.text, quote=False)

	def render_code_span(self, node:Node) -> str:
		return "<code>%s</code>" % escape(node.get_rule_text(Rule.code_text), quote=False)

	def render_strong(self, node:Node) -> str: return "<strong>%s</strong>" % self.render_children(node)
	def render_emphasis(self, node:Node) -> str: return "<em>%s</em>" % self.render_children(node)

def format_attributes(props:dict) -> str:
	return ''.join(' %s="%s"' % (key, escape(value)) for key, value in props.items())
