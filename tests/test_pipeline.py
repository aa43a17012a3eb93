from dataclasses import asdict

import pytest

from cannagraph import GraphConfig, run_build
from cannagraph.io import read_json
from cannagraph.pipeline import build_entity_graph
from cannagraph.records import CannabinoidMeasure

@pytest.fixture
def records(make_strain, make_product, make_pharmacy):
    strains = [make_strain("Amnesia Haze", thc=CannabinoidMeasure(range_low=20, range_high=22),
                           genetic_type="sativa", terpenes=["Myrcen"])]
    products = [make_product("Amnesia Haze 22/1", strain_name="Amnesia Haze", price_min=4500, price_max=5200,
                             stock_status=1, manufacturer="Aurora")]
    pharmacies = [make_pharmacy("Apotheke am Markt", city="Berlin", has_delivery=True)]
    return strains, products, pharmacies

def test_end_to_end(records):
    graph = build_entity_graph(*records)

    strain = graph.strains["amnesia-haze"]
    assert (strain.thc_min, strain.thc_max) == (20, 22)
    assert strain.product_slugs == ["amnesia-haze-22-1"]
    assert (strain.price_min, strain.price_max) == (4500, 5200)
    assert strain.is_indexable and strain.indexability_reason == "Has products"

    product = graph.products["amnesia-haze-22-1"]
    assert product.strain_slug == "amnesia-haze"
    assert product.indexability_reason == "In stock"

    pharmacy = graph.pharmacies["apotheke-am-markt"]
    assert pharmacy.is_indexable and pharmacy.indexability_reason == "Has services"

    city = graph.cities["berlin"]
    assert city.pharmacy_count == 1 and city.has_delivery_pharmacy
    assert not city.is_indexable and city.indexability_reason == "Too few pharmacies/products"

    assert graph.stats.as_dict() == {
        "total_strains": 1, "total_products": 1, "total_pharmacies": 1, "total_cities": 1,
        "total_brands": 1, "total_terpenes": 1,
        "indexable_strains": 1, "indexable_products": 1, "indexable_cities": 0, "indexable_pharmacies": 1,
    }

def test_empty_inputs():
    graph = build_entity_graph([], [], [])
    assert all(v == 0 for v in graph.stats.as_dict().values())
    assert graph.frozen

def test_build_is_deterministic(records):
    first = build_entity_graph(*records)
    second = build_entity_graph(*records)
    for name in ("strains", "products", "pharmacies", "cities", "brands", "terpenes"):
        a, b = getattr(first, name), getattr(second, name)
        assert list(a) == list(b)
        assert [asdict(n) for n in a.values()] == [asdict(n) for n in b.values()]
    assert first.stats == second.stats

def test_finished_graph_is_read_only(records):
    graph = build_entity_graph(*records)
    with pytest.raises(TypeError):
        graph.strains["new"] = graph.strains["amnesia-haze"]
    with pytest.raises(TypeError):
        graph.strains_by_name["other"] = "amnesia-haze"
    with pytest.raises(AttributeError):
        graph.products_by_strain["amnesia-haze"].append("x")

def test_report_and_metrics(records, tmp_path):
    report = run_build(*records, config=GraphConfig(report_dir=tmp_path / "reports"))
    assert report.ok
    assert report.contract_errors == []
    assert [s["id"] for s in report.summary["stages"]] == \
        ["strains", "products", "pharmacies", "similarity", "indexability", "stats"]
    assert report.metrics["counters"]["products.linked_by_name"] == 1
    assert "stage.similarity" in report.metrics["timings"]

    written = read_json(tmp_path / "reports" / "run.json")
    assert written["ok"] is True
    assert written["stats"]["total_strains"] == 1
    assert written["contract_errors"] == []
    assert written["config"]["city_min_products"] == 10
    assert written["config"]["report_dir"] == str(tmp_path / "reports")

def test_city_threshold_from_config(records):
    strains, products, pharmacies = records
    graph = build_entity_graph(strains, products, pharmacies, GraphConfig(city_min_products=0))
    assert graph.cities["berlin"].indexability_reason == "Single pharmacy with good product coverage"
