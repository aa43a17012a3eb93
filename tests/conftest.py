"""Pytest fixtures: small record factories for graph tests"""
import itertools
import pytest

from cannagraph.records import CannabinoidMeasure, PharmacyRecord, ProductRecord, StrainRecord

@pytest.fixture
def make_strain():
    ids = itertools.count(1)

    def _make(name, thc_max=None, genetic_type=None, terpenes=(), effects=(), description=None, **kw):
        thc = kw.pop("thc", None)
        if thc is None and thc_max is not None:
            thc = CannabinoidMeasure(value=thc_max)
        return StrainRecord(
            id=kw.pop("id", f"s{next(ids)}"),
            name=name,
            thc=thc,
            genetic_type=genetic_type,
            terpenes=list(terpenes),
            effects=list(effects),
            description_de=description,
            **kw,
        )
    return _make

@pytest.fixture
def make_product():
    ids = itertools.count(1)

    def _make(name, strain_name=None, price_min=None, price_max=None, stock_status=0, **kw):
        return ProductRecord(
            id=kw.pop("id", f"p{next(ids)}"),
            name=name,
            strain_name=strain_name,
            price_min=price_min,
            price_max=price_max,
            stock_status=stock_status,
            **kw,
        )
    return _make

@pytest.fixture
def make_pharmacy():
    ids = itertools.count(1)

    def _make(name, city="Berlin", has_delivery=False, product_count=0, **kw):
        return PharmacyRecord(
            id=kw.pop("id", f"ph{next(ids)}"),
            name=name,
            city=city,
            has_delivery=has_delivery,
            product_count=product_count,
            **kw,
        )
    return _make
