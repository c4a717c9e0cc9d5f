"""
A structural dump of a parse tree, for people: debugging, introspection, and tests.

	* A leaf shows its rule name and the text it matched:  lang ["ts"]
	* A node with exactly one child is drawn on the same line as that child, joined by " > ".
	  Grammars are full of these "orphan" chains (heading > h1 > text ...), and giving each link
	  its own level of indentation would bury the interesting bits on the right edge of the screen.
	* A node with several children gets a line of its own, and the children go one level deeper.

This is presentation only. It has no bearing on what the grammar matches.
"""

INDENT = '  '

ESCAPES = {'\\':'\\\\', '"':'\\"', '\n':'\\n', '\r':'\\r', '\t':'\\t'}

def quoted(text:str) -> str:
	return '"' + ''.join(ESCAPES.get(c, c) for c in text) + '"'

def describe(node, level:int=0) -> str:
	return "\n".join(_lines(node, level))

def _lines(node, level):
	head = [node.name]
	children = node.children
	while len(children) == 1:
		node = children[0]
		head.append(node.name)
		children = node.children
	line = INDENT * level + " > ".join(head)
	if not children:
		yield "%s [%s]" % (line, quoted(node.text))
	else:
		yield line
		for child in children:
			yield from _lines(child, level + 1)
