# tests/conftest.py
"""
Shared Rust sources and fixtures for the shadowlight test-suite.

Sources are dedented so that line 1 is the first line of code; the line
numbers asserted in the tests depend on that.
"""

import logging
import textwrap

import pytest


def rust(src: str) -> str:
    return textwrap.dedent(src).lstrip("\n")


# Scenario A: one function, `x` bound twice.
SHADOW_FN_RS = rust("""
    fn main() {
        let x = 1;
        let x = 2;
    }
""")

# Scenario B: distinct names only.
CLEAN_FN_RS = rust("""
    fn main() {
        let x = 1;
        let y = 2;
    }
""")

# Scenario C: a method bound three times.
IMPL_METHOD_RS = rust("""
    struct S;

    impl S {
        fn m(&self) {
            let a = 1;
            let a = 2;
            let a = 3;
        }
    }
""")

# Scenario D: a `let` with no enclosing function.
CONST_BLOCK_RS = rust("""
    const X: i32 = { let a = 1; a };
""")

# Scenario E: the same name shadowed independently in two functions.
TWO_FNS_RS = rust("""
    fn first() {
        let v = 1;
        let v = 2;
    }

    fn second() {
        let v = 10;
        let v = 20;
        let v = 30;
    }
""")

NESTED_FN_RS = rust("""
    fn outer() {
        let a = 1;
        fn inner() {
            let b = 1;
        }
        let a = 2;
    }
""")

CLOSURE_RS = rust("""
    fn f() {
        let x = 1;
        let g = |y: i32| {
            let x = y + 1;
            x
        };
        let x = g(x);
    }
""")

MACRO_RS = rust("""
    fn mac() {
        let z = 1;
        println!("{}", { let z = 2; z });
        vec![{ let z = 3; z }];
    }
""")

IF_LET_MATCH_RS = rust("""
    fn m(opt: Option<i32>) {
        if let Some(v) = opt {
            let v = v + 1;
        }
        match opt {
            Some(n) => {
                let n = n * 2;
            }
            None => {}
        }
    }
""")

DESTRUCTURE_RS = rust("""
    fn d() {
        let (a, b) = (1, 2);
        let Point { x, y: b } = p;
        let [first, .., last] = arr;
        let &(ref c, mut d) = pair;
    }
""")

TRAIT_RS = rust("""
    trait T {
        fn required(&self);
        fn provided(&self) {
            let v = 1;
            let v = 2;
        }
    }
""")

KITCHEN_SINK_RS = rust("""
    //! Crate docs.
    #![allow(dead_code)]

    use std::collections::HashMap;
    use std::fmt::{self, Display};

    /// A point.
    #[derive(Debug, Clone)]
    pub struct Point<'a> {
        x: i32,
        name: &'a str,
    }

    pub enum Shape {
        Circle { r: f64 },
        Square(f64),
    }

    const LIMIT: usize = 10;
    static GREETING: &str = "hi {";

    macro_rules! square {
        ($e:expr) => {{ let v = $e; v * v }};
    }

    impl<'a> Point<'a> {
        pub fn new(x: i32, name: &'a str) -> Self {
            let p = Point { x, name };
            let p = Point { x: p.x + 1, ..p };
            p
        }

        fn area(&self) -> f64 where Self: Sized {
            let s = r#"raw { string "#;
            let c = '{';
            let s = format!("{}{}", s, c);
            s.len() as f64
        }
    }

    fn parse(input: &str) -> Result<i32, String> {
        let Some(first) = input.chars().next() else {
            return Err("empty".to_string());
        };
        let n: i32 = input.parse().map_err(|e| format!("{:?}", e))?;
        let n = n * 2; // shadowed
        /* block { comment */
        let map: HashMap<String, Vec<i32>> = HashMap::new();
        for (k, v) in map.iter() {
            let k = k.len();
        }
        Ok(n + first as i32)
    }
""")

BROKEN_RS = rust("""
    fn main( {
        let x = 1;
    }
""")


@pytest.fixture
def rs_file(tmp_path):
    """Factory writing a Rust source into ``tmp_path``; returns its path."""
    def _write(name: str, text: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop the CLI handler so each test starts from a clean logger."""
    yield
    logger = logging.getLogger("shadowlight")
    for handler in [h for h in logger.handlers if h.get_name() == "shadowlight-cli"]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
