from emote_inliner.chat.emotes.catalog import EmoteCatalog
from emote_inliner.chat.emotes.rewriter import plain_text, rewrite, rewrite_text, split_tokens
from emote_inliner.chat.models import EmoteNode, TextNode


def _catalog(**emotes) -> EmoteCatalog:
    catalog = EmoteCatalog()
    for name, url in emotes.items():
        catalog.add(name, url)
    return catalog


def _shape(nodes):
    return [(node.type, getattr(node, "name", None) or node.content) for node in nodes]


def test_token_exactness():
    nodes = rewrite([TextNode("KEK keko KEK!")], _catalog(KEK="url1"))
    assert nodes == [
        EmoteNode(name="KEK", id="KEK", src="url1", animated=True),
        TextNode(" "),
        TextNode("keko"),
        TextNode(" "),
        TextNode("KEK!"),
    ]


def test_match_is_case_sensitive():
    nodes = rewrite([TextNode("kek KEK")], _catalog(KEK="url1"))
    assert _shape(nodes) == [("text", "kek"), ("text", " "), ("emoji", "KEK")]


def test_punctuation_in_name_matches():
    nodes = rewrite([TextNode("hi D:")], _catalog(**{"D:": "url-d"}))
    assert nodes[-1] == EmoteNode(name="D:", id="D:", src="url-d")


def test_emote_node_is_animated_with_name_as_id():
    (node,) = rewrite([TextNode("Kappa")], _catalog(Kappa="https://cdn/kappa"))
    assert node.type == "emoji"
    assert node.id == "Kappa"
    assert node.src == "https://cdn/kappa"
    assert node.animated is True


def test_empty_catalog_is_noop():
    text = "hello  world\tfoo\n bar "
    nodes = rewrite([TextNode(text)], EmoteCatalog())
    assert all(isinstance(node, TextNode) for node in nodes)
    assert "".join(node.content for node in nodes) == text


def test_missing_catalog_treated_as_empty():
    nodes = rewrite([TextNode("Kappa 123")], None)
    assert _shape(nodes) == [("text", "Kappa"), ("text", " "), ("text", "123")]


def test_whitespace_tokens_are_preserved():
    assert split_tokens("a \t b\n\nc") == ["a", " \t ", "b", "\n\n", "c"]
    assert split_tokens("  lead trail  ") == ["  ", "lead", " ", "trail", "  "]


def test_rewrite_is_lossless():
    text = "PogU\tKEKW  nice  PogU\n"
    catalog = _catalog(PogU="u1", KEKW="u2")
    assert plain_text(rewrite_text(text, catalog)) == text


def test_non_text_nodes_pass_through():
    existing = EmoteNode(name="Custom", id="123", src="https://discord/123", animated=False)
    other = object()
    nodes = rewrite(
        [TextNode("a KEK"), existing, other, TextNode("KEK")],
        _catalog(KEK="url1"),
    )
    assert nodes[3] is existing
    assert nodes[4] is other
    assert nodes[5] == EmoteNode(name="KEK", id="KEK", src="url1")
    assert len(nodes) == 6


def test_input_is_not_mutated():
    original = [TextNode("KEK hi")]
    snapshot = list(original)
    result = rewrite(original, _catalog(KEK="url1"))
    assert original == snapshot
    assert result is not original


def test_empty_text_node_produces_no_nodes():
    assert rewrite([TextNode("")], _catalog(KEK="url1")) == []
