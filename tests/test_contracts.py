import pytest

from cannagraph.contracts import load_contract, verify
from cannagraph.errors import ContractError
from cannagraph.pipeline import build_entity_graph

@pytest.fixture
def graph(make_strain, make_product, make_pharmacy):
    return build_entity_graph(
        [make_strain("Amnesia Haze", thc_max=22, terpenes=["Myrcen"]), make_strain("Lemon Haze")],
        [make_product("Amnesia 22/1", strain_name="Amnesia Haze", manufacturer="Aurora"),
         make_product("Unlinked 10/1")],
        [make_pharmacy("Apotheke Mitte"), make_pharmacy("Landapotheke", city=None)],
    )

def _contract(tmp_path, text):
    path = tmp_path / "contract.yml"
    path.write_text(text, encoding="utf-8")
    return path

def test_default_contract_loads():
    kinds = {c["kind"] for c in load_contract()["checks"]}
    assert kinds == {"count_matches_list", "backlink", "no_dangling", "similar_bounds", "reason_present"}

def test_built_graph_passes(graph):
    assert verify(graph) == []

def test_broken_counter_is_reported(graph):
    graph.strains["amnesia-haze"].product_count = 5
    errors = verify(graph)
    assert errors == ["strains/amnesia-haze: product_count=5 but 1 product_slugs"]

def test_dangling_and_self_references_are_reported(graph):
    graph.products["unlinked-10-1"].strain_slug = "ghost"
    graph.strains["lemon-haze"].similar_strain_slugs = ["lemon-haze"]
    errors = verify(graph)
    assert "products/unlinked-10-1: strain_slug -> missing strains/ghost" in errors
    assert "strains/lemon-haze: lists itself as similar" in errors

def test_unknown_check_kind(graph, tmp_path):
    path = _contract(tmp_path, "checks:\n  - kind: bogus\n")
    assert verify(graph, contract=path) == ["unknown check kind: bogus"]

def test_malformed_check(graph, tmp_path):
    path = _contract(tmp_path, "checks:\n  - kind: backlink\n    collection: strains\n")
    with pytest.raises(ContractError):
        verify(graph, contract=path)

def test_invalid_yaml(tmp_path):
    with pytest.raises(ContractError):
        load_contract(_contract(tmp_path, "checks: [unclosed\n"))

def test_missing_contract(tmp_path):
    with pytest.raises(ContractError, match="not found"):
        load_contract(tmp_path / "nope.yml")
