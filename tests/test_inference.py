from pathlib import Path
import unittest
from unittest import mock

from kindred import syntax
from kindred.diagnostics import Report
from kindred.kinds import STAR
from kindred.location import Span
from kindred.ontology import Nom
from kindred.primitive import literal_number, literal_flag, literal_unit, list_of, standard_preamble
from kindred.schemes import Scheme, VariableSupply
from kindred.type_inference import infer_types, DeductionEngine, ANYTHING
from kindred.types import TGen, arrow, arrows

SPECIMEN = Path("specimen.kal")

class Silence(Report):
	def __init__(self, max_issues=30):
		super().__init__(verbose=False, max_issues=max_issues)
		self.complain_to_console = mock.Mock()

# A few helpers to stand in for the parser.

_offset = [0]

def nom(text):
	start = _offset[0]
	_offset[0] += len(text) + 1
	return Nom(text, Span(SPECIMEN, start, start + len(text)))

def num(value):
	return syntax.Number(value, nom(str(value)).span)

def ref(name):
	return syntax.Variable(nom(name))

def call(name, *args):
	return syntax.Call(nom(name), args)

def binary(op, lhs, rhs):
	return syntax.Binary(op, lhs, rhs)

def cond(if_part, then_part, else_part):
	return syntax.Cond(if_part, then_part, else_part)

def let(name, value, body):
	return syntax.Let(nom(name), value, body)

def fn(name, params, body):
	return syntax.Function(syntax.Prototype(nom(name), [nom(p) for p in params]), body)

def extern(name, *params):
	return syntax.Prototype(nom(name), [nom(p) for p in params], is_extern=True)

NUMBER_TO_NUMBER = Scheme.monomorphic(arrow(literal_number, literal_number))
NUMBER_TO_FLAG = Scheme.monomorphic(arrow(literal_number, literal_flag))

class InferenceTestCase(unittest.TestCase):
	
	def setUp(self) -> None:
		self.report = Silence()
	
	def infer(self, *functions, externs=(), main=()):
		module = syntax.Module(externs=externs, functions=functions, main=main, path=SPECIMEN)
		return infer_types(module, self.report)
	
	def assert_clean(self):
		self.assertTrue(self.report.ok(), [p.intro for p in self.report.issues])

class ThingsThatShouldType(InferenceTestCase):
	
	def test_identity_is_polymorphic(self):
		schemes = self.infer(fn("id", ["x"], ref("x")))
		self.assert_clean()
		self.assertEqual(Scheme([STAR], arrow(TGen(0), TGen(0))), schemes["id"])
		self.assertEqual("forall 'a. 'a -> 'a", str(schemes["id"]))
	
	def test_constant_function(self):
		schemes = self.infer(fn("const", ["a", "b"], ref("a")))
		self.assert_clean()
		self.assertEqual("forall 'a 'b. 'a -> 'b -> 'a", str(schemes["const"]))
	
	def test_arithmetic(self):
		schemes = self.infer(fn("add", ["a", "b"], binary("+", ref("a"), ref("b"))))
		self.assert_clean()
		self.assertEqual(Scheme.monomorphic(arrows([literal_number, literal_number], literal_number)), schemes["add"])
	
	def test_each_use_gets_its_own_instance(self):
		schemes = self.infer(
			fn("id", ["x"], ref("x")),
			fn("both", [], binary(
				"&&",
				call("is_empty", call("cons", call("id", num(1)), ref("nil"))),
				call("id", ref("true")),
			)),
		)
		self.assert_clean()
		self.assertEqual(Scheme.monomorphic(arrow(literal_unit, literal_flag)), schemes["both"])
	
	def test_recursion(self):
		schemes = self.infer(fn("fact", ["n"], cond(
			binary("<", ref("n"), num(1)),
			num(1),
			binary("*", ref("n"), call("fact", binary("-", ref("n"), num(1)))),
		)))
		self.assert_clean()
		self.assertEqual(NUMBER_TO_NUMBER, schemes["fact"])
	
	def test_mutual_recursion_in_any_order(self):
		schemes = self.infer(
			fn("user", [], call("even", num(4))),
			fn("even", ["n"], cond(binary("<", ref("n"), num(1)), ref("true"), call("odd", binary("-", ref("n"), num(1))))),
			fn("odd", ["n"], cond(binary("<", ref("n"), num(1)), ref("false"), call("even", binary("-", ref("n"), num(1))))),
		)
		self.assert_clean()
		self.assertEqual(NUMBER_TO_FLAG, schemes["even"])
		self.assertEqual(NUMBER_TO_FLAG, schemes["odd"])
		self.assertEqual(Scheme.monomorphic(arrow(literal_unit, literal_flag)), schemes["user"])
	
	def test_let_generalizes(self):
		body = let("e", ref("nil"), binary(
			"&&",
			call("is_empty", call("cons", num(1), ref("e"))),
			call("is_empty", call("cons", ref("true"), ref("e"))),
		))
		schemes = self.infer(fn("f", [], body))
		self.assert_clean()
		self.assertEqual(Scheme.monomorphic(arrow(literal_unit, literal_flag)), schemes["f"])
	
	def test_polymorphic_list_functions(self):
		schemes = self.infer(fn("second", ["xs"], call("head", call("tail", ref("xs")))))
		self.assert_clean()
		self.assertEqual(Scheme([STAR], arrow(list_of(TGen(0)), TGen(0))), schemes["second"])
	
	def test_parameters_shadow_top_level_names(self):
		schemes = self.infer(
			fn("g", [], ref("true")),
			fn("h", ["g"], binary("+", ref("g"), num(1))),
		)
		self.assert_clean()
		self.assertEqual(NUMBER_TO_NUMBER, schemes["h"])
	
	def test_externs_and_main(self):
		report = Silence()
		engine = DeductionEngine(standard_preamble, report, VariableSupply())
		engine.declare_extern(extern("sin", "x"))
		self.assertEqual(NUMBER_TO_NUMBER, engine.schemes["sin"])
		self.assertEqual(literal_number, engine.solve_expression(call("sin", num(1))))
		self.assertTrue(report.ok())
		self.assertEqual([literal_number], engine.main_types)
	
	def test_nullary_extern(self):
		schemes = self.infer(externs=[extern("clock")], main=[binary("+", call("clock"), num(1))])
		self.assert_clean()
		self.assertEqual(Scheme.monomorphic(arrow(literal_unit, literal_number)), schemes["clock"])

class ThingsThatShouldNotType(InferenceTestCase):
	
	def test_mismatch_is_reported_and_siblings_carry_on(self):
		schemes = self.infer(
			fn("bad", ["n"], binary("+", ref("n"), ref("true"))),
			fn("good", ["n"], binary("*", ref("n"), num(2))),
			fn("user", ["n"], binary("+", call("bad", ref("n")), num(1))),
		)
		self.assertEqual(1, len(self.report.issues))
		self.assertEqual("Types need to match here, but they do not.", self.report.issues[0].intro)
		caption = self.report.issues[0].captions()[0]
		self.assertIn("number", caption)
		self.assertIn("flag", caption)
		self.assertEqual(ANYTHING, schemes["bad"])
		self.assertEqual(NUMBER_TO_NUMBER, schemes["good"])
		self.assertIn("user", schemes)
	
	def test_parameters_are_not_generalized(self):
		body = let("y", ref("x"), binary(
			"&&",
			binary("<", binary("+", ref("y"), num(1)), num(2)),
			call("is_empty", call("cons", ref("y"), call("cons", ref("true"), ref("nil")))),
		))
		schemes = self.infer(fn("g", ["x"], body))
		self.assertEqual(1, len(self.report.issues))
		self.assertEqual(ANYTHING, schemes["g"])
	
	def test_occurs_check(self):
		self.infer(fn("loop", ["f"], call("f", ref("f"))))
		self.assertEqual(1, len(self.report.issues))
		self.assertIn("cannot be part of itself", self.report.issues[0].captions()[0])
	
	def test_wrong_number_of_arguments(self):
		self.infer(
			fn("inc", ["n"], binary("+", ref("n"), num(1))),
			fn("bogus", [], call("inc", num(1), num(2))),
		)
		self.assertEqual(1, len(self.report.issues))
	
	def test_condition_must_be_a_flag(self):
		self.infer(fn("f", ["n"], cond(binary("+", ref("n"), num(1)), num(1), num(2))))
		self.assertEqual(1, len(self.report.issues))
	
	def test_undefined_name(self):
		schemes = self.infer(fn("f", ["n"], call("mystery", ref("n"))))
		self.assertEqual(1, len(self.report.issues))
		self.assertEqual("I don't see what this refers to.", self.report.issues[0].intro)
		self.assertEqual(ANYTHING, schemes["f"])
	
	def test_unknown_operator(self):
		self.infer(fn("f", ["n"], binary("%", ref("n"), num(2))))
		self.assertEqual(1, len(self.report.issues))
	
	def test_defined_twice(self):
		schemes = self.infer(fn("f", [], num(1)), fn("f", [], ref("true")))
		self.assertEqual(1, len(self.report.issues))
		self.assertIn("more than once", self.report.issues[0].intro)
		self.assertEqual(Scheme.monomorphic(arrow(literal_unit, literal_number)), schemes["f"])
	
	def test_main_expression_failure(self):
		self.infer(main=[binary("+", num(1), ref("false")), binary("+", num(1), num(2))])
		self.assertEqual(1, len(self.report.issues))
	
	def test_too_many_issues(self):
		self.report = Silence(max_issues=2)
		schemes = self.infer(
			fn("a", [], binary("+", num(1), ref("true"))),
			fn("b", [], binary("+", num(1), ref("false"))),
			fn("c", [], binary("&&", num(1), ref("true"))),
			fn("good", ["x"], ref("x")),
		)
		self.assertEqual(2, len(self.report.issues))
		self.assertEqual(1, self.report.nr_dropped)
		for name in "abc":
			self.assertEqual(ANYTHING, schemes[name])
		self.assertEqual("forall 'a. 'a -> 'a", str(schemes["good"]))
	
	def test_default_limit_still_checks_everything(self):
		self.report = Report()
		schemes = self.infer(
			fn("one", [], binary("+", num(1), ref("true"))),
			fn("two", [], binary("+", num(2), ref("true"))),
			fn("three", [], binary("+", num(3), ref("true"))),
			fn("good", ["x"], ref("x")),
			main=[binary("+", num(4), ref("true")), call("good", num(5))],
		)
		self.assertEqual(3, len(self.report.issues))
		self.assertIn("good", schemes)
		self.assertEqual(Scheme([STAR], arrow(TGen(0), TGen(0))), schemes["good"])
	
	def test_limit_reached_by_duplicates(self):
		self.report = Silence(max_issues=1)
		schemes = self.infer(
			fn("f", [], num(1)),
			fn("f", [], num(2)),
			fn("g", ["n"], binary("+", ref("n"), num(1))),
		)
		self.assertEqual(1, len(self.report.issues))
		self.assertEqual(NUMBER_TO_NUMBER, schemes["g"])

if __name__ == '__main__':
	unittest.main()
