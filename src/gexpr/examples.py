"""Sample G-expressions shown by ``gexreg examples``."""

from .model import app, branch, fix, lam, lit, match, ref, vec

EXAMPLES = [
    ("Literal Number", "A simple number literal", lit(42)),
    ("Literal String", "A string literal", lit("hello")),
    ("Variable Reference", "Reference to a variable named 'x'", ref("x")),
    ("Vector", "A vector containing three numbers", vec([lit(1), lit(2), lit(3)])),
    (
        "Addition Application",
        "Apply add to arguments [2, 3]",
        app(ref("add"), vec([lit(2), lit(3)])),
    ),
    ("Identity Function", "Lambda returning its argument", lam(["x"], ref("x"))),
    (
        "Add Function",
        "Lambda adding two numbers",
        lam(["x", "y"], app(ref("add"), vec([ref("x"), ref("y")]))),
    ),
    (
        "Function Application",
        "Apply the identity function to 42",
        app(lam(["x"], ref("x")), lit(42)),
    ),
    (
        "Nested Application",
        "Nested function application",
        app(
            lam(["f", "x"], app(ref("f"), ref("x"))),
            vec([lam(["y"], app(ref("add"), vec([ref("y"), lit(1)]))), lit(5)]),
        ),
    ),
    (
        "Y Combinator",
        "Fixed-point combinator for recursion",
        fix(lam(["f"], lam(["x"], app(ref("f"), app(ref("f"), ref("x")))))),
    ),
    (
        "Pattern Match",
        "Match on a boolean with a catch-all branch",
        match(ref("flag?"), [branch({"g": "lit", "v": True}, lit("yes")), branch("else", lit("no"))]),
    ),
]
