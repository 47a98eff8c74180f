import sys, random
from pathlib import Path
from boozetools.support.failureprone import SourceText, illustration

from .location import recall_text
from .ontology import Phrase, Nom

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	
	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Blasted Thing',
		'Confound it', 'Crud', 'Curses', "Crikey",
		'Dag Nabbit', 'Drat', 'Fiddlesticks', 'Good Grief',
		'Great Googly Moogly', "Great Scott", 'Heavens', 'Nuts', 'Rats',
		'Woe is me',
	]
	
	resignations = [
		'I am undone.',
		'I cannot continue.',
		'I have no idea what the right type is.',
		'I need to ask for help.',
	]
	
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	Collects issues as they come up, so that a failing declaration does not
	stop the checker looking at its siblings. Nothing is printed until somebody
	calls complain_to_console, except progress notes in verbose mode.
	"""
	_issues : list["Pic"]
	
	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._redefined = {}
		self._undefined = None
		self._max_issues = max_issues
		self.nr_dropped = 0

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	
	@property
	def issues(self) -> tuple["Pic", ...]: return tuple(self._issues)
	
	def issue(self, it:"Pic"):
		"""
		Raises TooManyIssues upon reaching the limit, exactly once.
		Past the limit, further issues are counted but not kept.
		"""
		if len(self._issues) >= self._max_issues:
			self.nr_dropped += 1
			return
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)
	
	def reset(self):
		self._issues.clear()
		self._redefined.clear()
		self._undefined = None
		self.nr_dropped = 0

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)
	
	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues, self.nr_dropped)
			
	def assert_no_issues(self, message=""):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)
	
	# Methods the call-graph pass might call:

	def redefined(self, text:str, first:Phrase, guilty:Phrase):
		key = text, first
		if key not in self._redefined:
			intro = "This symbol is defined more than once in the same scope."
			issue = Pic(intro, [Annotation(first, "Earliest definition")])
			self._redefined[key] = issue
			issue.also(guilty)
			self.issue(issue)
		else:
			self._redefined[key].also(guilty)

	# Methods the inference driver calls:

	def undefined_name(self, guilty:Nom):
		assert isinstance(guilty, Phrase)
		if self._undefined is None:
			intro = "I don't see what this refers to."
			self._undefined = Pic(intro, [])
			self._undefined.also(guilty)
			self.issue(self._undefined)
		else:
			self._undefined.also(guilty)
	
	def type_mismatch(self, failure):
		"""
		The failure is a UnifyError that the driver has given
		a place (``at``) and the larger terms involved (``context``).
		"""
		delta = {}
		intro = "Types need to match here, but they do not."
		problem = [Annotation(failure.at, failure.describe(delta))]
		footer = []
		if failure.context is not None:
			lhs, rhs = failure.context
			if (lhs, rhs) != (failure.lhs, failure.rhs):
				footer.append("While matching %s against %s." % (lhs.render(delta), rhs.render(delta)))
		self.issue(Pic(intro, problem, footer))
	
	def internal_error(self, site:Phrase, failure:Exception):
		""" Not the user's fault. Reported apart from ordinary type errors so nobody confuses the two. """
		intro = "This code hits a bug in the type-checker."
		footer = ["", "Hint: %s: %s" % (type(failure).__name__, failure)]
		self.issue(Pic(intro, [Annotation(site, "while checking this")], footer))

class Annotation:
	path: Path
	slice: slice
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		span = node.span
		self.path = span.path
		self.slice = span.as_slice()
		self.caption = caption
	def illustrate(self):
		source = _fetch(self.path)
		row, col = source.find_row_col(self.slice.start)
		single_line = source.line_of_text(row)
		width = self.slice.stop - self.slice.start
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self.intro, self._anns, self._footer = intro, anns, footer
	def also(self, node, caption:str=""): self._anns.append(Annotation(node, caption))
	def captions(self) -> list[str]: return [ann.caption for ann in self._anns]
	def as_text(self):
		lines = [self.intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _fetch(path) -> SourceText:
	if path is None:
		return SourceText("")
	return SourceText(recall_text(path), filename=str(path))

def _bemoan(issues, nr_dropped=0):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	if nr_dropped:
		print("  -"*20, file=sys.stderr)
		print("... and %d more, not shown." % nr_dropped, file=sys.stderr)
	sys.stderr.flush()
