import setuptools

setuptools.setup(
	name='parkdown',
	version='0.1.0',
	packages=[
		'parkdown',
		'parkdown.arborist',
		'parkdown.peg',
		'parkdown.support',
	],
	description='A markdown-like document language on a small PEG engine, with a rule-indexed parse tree',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Topic :: Software Development :: Compilers",
		"Topic :: Text Processing :: Markup",
		"Development Status :: 3 - Alpha",
	],
	python_requires='>=3.9',
)
