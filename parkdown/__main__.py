"""
Parse a Parkdown document and show the result: either the structure of the
parse tree (the default) or the HTML it renders to (with --transform).
"""

import sys, argparse

from parkdown.peg import engine
from parkdown.peg.interface import GrammarFailure, StructuralViolation
from parkdown.pipeline import Parkdown, Output

def parse_arguments(argv=None):
	parser = argparse.ArgumentParser(prog='py -m parkdown', description=__doc__,)
	parser.add_argument('source_path', nargs='?', default='test.md', help='path to input file (default: test.md)')
	parser.add_argument('-t', '--transform', action='store_true', help='render to HTML instead of dumping the parse tree')
	parser.add_argument('-r', '--rule', default='file', help='grammar rule to parse with (default: file)')
	parser.add_argument('-v', '--verbose', action='store_true', help="Squawk about what the parser is doing.")
	return parser.parse_args(argv)

def main(args):
	if args.verbose: engine.VERBOSE = True
	output = Output.HTML if args.transform else Output.TOKENS
	try: doc = Parkdown.from_file(args.source_path, rule=args.rule)
	except OSError as e:
		print("Could not read %s: %s" % (args.source_path, e.strerror), file=sys.stderr)
		sys.exit(1)
	if args.rule not in doc.grammar:
		print("There is no rule called %r." % args.rule, file=sys.stderr)
		sys.exit(1)
	print("Parsing %s [%d chars, to %s]:" % (args.source_path, len(doc.content), output.name))
	try:
		doc.parse()
		if args.transform: doc.transform()
	except (GrammarFailure, StructuralViolation) as e:
		print(str(e), file=sys.stderr)
		sys.exit(1)
	print(doc.render(output))

if __name__ == '__main__': main(parse_arguments())
