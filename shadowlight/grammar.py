"""
grammar.py — Rust source grammar (Parsimonious PEG)
====================================================

A tolerant PEG for the parts of Rust that decide where function scopes
and ``let`` bindings are:

    * items: ``fn``, ``impl``, ``trait``, ``mod``, ``const``/``static``,
      macro invocations, and every other item kept as an opaque token tree
    * blocks and statements: ``let`` statements with structured patterns,
      nested items, and expression statements
    * expressions as token soup in which ``{ ... }`` groups are parsed as
      blocks, so closures, ``if``/``match``/``loop`` bodies and block
      initializers are searched for further ``let`` statements

Macro invocation bodies, attributes, signatures, generics and types are
opaque balanced token trees.  The grammar never needs expression
precedence: a ``let`` can only start a statement, so an expression
statement simply stops at the next ``let`` or item keyword.

Lexical tokens consume their trailing whitespace and comments (``_``).

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

from parsimonious.grammar import Grammar

__all__ = ["RUST_GRAMMAR", "RUST_GRAMMAR_TEXT"]

RUST_GRAMMAR_TEXT = r"""
    # ─────────────────────────────────────────────────────────────
    # Top-Level Structure
    # ─────────────────────────────────────────────────────────────

    file                = _ item*

    # A trailing inner attribute with nothing after it is an item too.
    item                = attr* vis? item_kind / attr
    item_kind           = fn_item / impl_item / trait_item / mod_item
                        / const_item / macro_item / other_item

    # ─────────────────────────────────────────────────────────────
    # Functions (free functions and methods)
    # ─────────────────────────────────────────────────────────────

    # Rules with a visit_ method in the tree builder must not be bare
    # aliases (``a = b``); parsimonious would resolve them to ``b``.
    fn_item             = fn_qual* kw_fn fn_name head_piece* fn_body
    fn_qual             = kw_const / kw_async / kw_unsafe / kw_default / abi
    abi                 = kw_extern string_lit?
    fn_name             = !reserved word
    fn_body             = block / semi

    # ─────────────────────────────────────────────────────────────
    # Impl / Trait / Mod
    # ─────────────────────────────────────────────────────────────

    impl_item           = kw_unsafe? kw_impl head_piece* lbrace member* rbrace
    trait_item          = kw_unsafe? kw_auto? kw_trait trait_name head_piece*
                          lbrace member* rbrace
    trait_name          = !reserved word
    head_piece          = paren_tt / bracket_tt / !(lbrace / semi) token
    member              = attr* vis? member_kind / attr
    member_kind         = fn_item / const_item / macro_item / other_item

    mod_item            = kw_unsafe? kw_mod mod_name mod_body
    mod_name            = !reserved word
    mod_body            = semi / lbrace item* rbrace

    # ─────────────────────────────────────────────────────────────
    # Const / Static, Macros, everything else
    # ─────────────────────────────────────────────────────────────

    const_item          = (kw_const / kw_static) kw_mut? const_name colon
                          type_piece* const_init? semi
    const_name          = !reserved word
    const_init          = eq init_expr

    macro_item          = macro_path bang ident? delim_tt semi?

    other_item          = kw_unsafe? item_kw head_piece* other_end
    other_end           = semi / brace_tt semi?

    # ─────────────────────────────────────────────────────────────
    # Blocks & Statements
    # ─────────────────────────────────────────────────────────────

    block               = lbrace stmt* rbrace
    stmt                = semi / item_stmt / let_stmt / expr_stmt

    item_stmt           = attr* vis? item_kind

    let_stmt            = attr* kw_let pattern let_type? let_init? semi
    let_type            = colon type_piece*
    let_init            = eq init_expr
    type_piece          = paren_tt / bracket_tt / brace_tt / !(eq / semi) token

    init_expr           = init_piece+
    init_piece          = block / paren_group / bracket_group / macro_call
                        / let_cond / token

    expr_stmt           = expr_piece+ semi?
    expr_piece          = block / paren_group / bracket_group / macro_call
                        / let_cond / !stmt_stop token
    # Lookahead only: a ``let`` or the head of a nested item ends an
    # unterminated expression statement.
    stmt_stop           = ~r"(?:let|impl|trait|mod|struct|enum|use|type|extern)\b|(?:(?:const|async|unsafe|default)\s+|extern\s+(?:\"[^\"]*\"\s*)?)*fn\s+(?:r#)?[^\W\d]|unsafe\s+(?:impl|trait)\b"

    # ``if let`` / ``while let`` / ``&& let`` may sit inside an expression.
    let_cond            = (kw_if / kw_while / andand) kw_let

    # ─────────────────────────────────────────────────────────────
    # Structured Groups (expression context)
    # ─────────────────────────────────────────────────────────────

    paren_group         = lparen group_piece* rparen
    bracket_group       = lbracket group_piece* rbracket
    group_piece         = block / paren_group / bracket_group / macro_call / semi / token

    macro_call          = macro_path bang delim_tt
    macro_path          = path_sep? macro_seg (path_sep macro_seg)*
    macro_seg           = !keyword_nonpath word

    # ─────────────────────────────────────────────────────────────
    # Opaque Token Trees
    # ─────────────────────────────────────────────────────────────

    delim_tt            = paren_tt / bracket_tt / brace_tt
    paren_tt            = lparen tt* rparen
    bracket_tt          = lbracket tt* rbracket
    brace_tt            = lbrace tt* rbrace
    tt                  = delim_tt / semi / token

    attr                = "#" _ bang? lbracket tt* rbracket
    vis                 = kw_pub paren_tt?

    # ─────────────────────────────────────────────────────────────
    # Patterns
    # ─────────────────────────────────────────────────────────────

    pattern             = vert? pat_alt (vert pat_alt)*
    vert                = !"||" "|" _
    pat_alt             = pat_range / pat_ref / pat_tuple / pat_slice / pat_struct
                        / pat_tuple_struct / pat_path / pat_rest / pat_wild
                        / pat_lit / pat_ident

    pat_ident           = ref_marker? mut_marker? binding_name subpattern?
    ref_marker          = kw_ref
    mut_marker          = kw_mut
    binding_name        = !reserved word
    subpattern          = "@" _ pat_alt

    pat_ref             = ("&&" / "&") _ mut_marker? pat_alt
    pat_tuple           = lparen pat_list? rparen
    pat_slice           = lbracket pat_list? rbracket
    pat_list            = pattern (comma pattern)* comma?
    pat_tuple_struct    = path_expr lparen pat_list? rparen
    pat_struct          = path_expr lbrace field_list? rbrace
    field_list          = field_pat (comma field_pat)* comma?
    field_pat           = attr* (field_rest / field_named / field_shorthand)
    field_rest          = ".." _
    field_named         = field_member colon pattern
    field_member        = word / number
    field_shorthand     = ref_marker? mut_marker? binding_name

    pat_path            = path_sep path_seg (path_sep path_seg)*
                        / path_seg (path_sep path_seg)+
    path_expr           = path_sep? path_seg (path_sep path_seg)*
    path_seg            = word

    pat_range           = range_bound range_op range_bound
    range_bound         = minus? (char_lit / number / path_expr)
    range_op            = ("..=" / "..." / "..") _
    pat_rest            = ~r"\.\.(?![.=])" _
    pat_wild            = ~r"_(?!\w)" _
    pat_lit             = bool_lit / minus? (string_lit / char_lit / number)

    # ─────────────────────────────────────────────────────────────
    # Tokens
    # ─────────────────────────────────────────────────────────────

    # One regex for every token kind, tried in this order: raw string,
    # string, char, lifetime, number, word, punctuation.
    token               = ~r"[bc]?r(?P<hashes>#*)\"[\s\S]*?\"(?P=hashes)|[bc]?\"(?:[^\"\\]|\\[\s\S])*\"|b?'(?:[^'\\\n]|\\(?:u\{[0-9a-fA-F_]{1,6}\}|x[0-9a-fA-F]{2}|[\s\S]))'|'(?:r#)?[^\W\d]\w*|\d\w*(?:\.\d\w*)?|(?:r#)?[^\W\d]\w*|::|&&|\|\||\.\.=|\.\.\.|\.\.|[^\s\w()\[\]{};\"']" _

    string_lit          = raw_string / plain_string
    raw_string          = ~r'[bc]?r(#*)"[\s\S]*?"\1' _
    plain_string        = ~r'[bc]?"(?:[^"\\]|\\[\s\S])*"' _
    char_lit            = ~r"b?'(?:[^'\\\n]|\\(?:u\{[0-9a-fA-F_]{1,6}\}|x[0-9a-fA-F]{2}|[\s\S]))'" _
    number              = ~r"\d\w*(?:\.\d\w*)?" _
    bool_lit            = ~r"(?:true|false)\b" _

    word                = ~r"(?:r#)?[^\W\d]\w*" _
    ident               = !reserved word
    reserved            = ~r"(?:as|async|await|break|const|continue|crate|dyn|else|enum|extern|false|fn|for|if|impl|in|let|loop|match|mod|move|mut|pub|ref|return|self|Self|static|struct|super|trait|true|type|unsafe|use|where|while)\b"
    keyword_nonpath     = ~r"(?:as|async|await|break|const|continue|dyn|else|enum|extern|false|fn|for|if|impl|in|let|loop|match|mod|move|mut|pub|ref|return|static|struct|trait|true|type|unsafe|use|where|while)\b"

    item_kw             = ~r"(?:struct|enum|union|use|type|extern|static|const|trait)\b" _

    kw_fn               = ~r"fn\b" _
    kw_let              = ~r"let\b" _
    kw_const            = ~r"const\b" _
    kw_static           = ~r"static\b" _
    kw_async            = ~r"async\b" _
    kw_unsafe           = ~r"unsafe\b" _
    kw_default          = ~r"default\b" _
    kw_extern           = ~r"extern\b" _
    kw_impl             = ~r"impl\b" _
    kw_trait            = ~r"trait\b" _
    kw_auto             = ~r"auto\b" _
    kw_mod              = ~r"mod\b" _
    kw_pub              = ~r"pub\b" _
    kw_mut              = ~r"mut\b" _
    kw_ref              = ~r"ref\b" _
    kw_if               = ~r"if\b" _
    kw_while            = ~r"while\b" _

    lbrace              = "{" _
    rbrace              = "}" _
    lparen              = "(" _
    rparen              = ")" _
    lbracket            = "[" _
    rbracket            = "]" _
    semi                = ";" _
    comma               = "," _
    colon               = !"::" ":" _
    eq                  = ~r"=(?![=>])" _
    bang                = "!" _
    minus               = "-" _
    andand              = "&&" _
    path_sep            = "::" _

    # ─────────────────────────────────────────────────────────────
    # Whitespace & Comments
    # ─────────────────────────────────────────────────────────────

    _                   = line_trivia (block_comment line_trivia)*
    line_trivia         = ~r"(?:\s+|//[^\n]*)*"
    block_comment       = "/*" comment_part* "*/"
    comment_part        = block_comment / ~r"[^*/]+" / ~r"\*(?!/)" / ~r"/(?!\*)"
"""

RUST_GRAMMAR = Grammar(RUST_GRAMMAR_TEXT)
