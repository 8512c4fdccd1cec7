from app.services.resolver import find_all_descendants

from conftest import make_sub_asset


def ids(records):
    return [r["id"] for r in records]


def test_first_level_and_nested_in_pre_order():
    sub_assets = [
        make_sub_asset("B", "A1"),
        make_sub_asset("D", "A1"),
        make_sub_asset("C", "A1", "B"),
        make_sub_asset("E", "A1", "C"),
        make_sub_asset("F", "A1", "D"),
    ]
    assert ids(find_all_descendants("A1", None, sub_assets)) == ["B", "C", "E", "D", "F"]


def test_sub_asset_root_only_returns_its_own_subtree():
    sub_assets = [
        make_sub_asset("B", "A1"),
        make_sub_asset("C", "A1", "B"),
        make_sub_asset("D", "A1"),
        make_sub_asset("E", "A1", "D"),
    ]
    assert ids(find_all_descendants("A1", "B", sub_assets)) == ["C"]


def test_leaf_has_no_descendants():
    sub_assets = [make_sub_asset("B", "A1"), make_sub_asset("C", "A1", "B")]
    assert find_all_descendants("A1", "C", sub_assets) == []


def test_other_assets_components_are_ignored():
    sub_assets = [make_sub_asset("B", "A1"), make_sub_asset("X", "A2"), make_sub_asset("Y", "A2", "X")]
    assert ids(find_all_descendants("A1", None, sub_assets)) == ["B"]
    assert ids(find_all_descendants("A2", None, sub_assets)) == ["X", "Y"]


def test_self_reference_and_cycles_terminate():
    sub_assets = [
        make_sub_asset("B", "A1", "B"),
        make_sub_asset("C", "A1", "D"),
        make_sub_asset("D", "A1", "C"),
    ]
    assert find_all_descendants("A1", "B", sub_assets) == []
    assert ids(find_all_descendants("A1", "C", sub_assets)) == ["D"]


def test_deep_chain_does_not_hit_recursion_limit():
    depth = 3000
    sub_assets = [make_sub_asset("S0", "A1")]
    sub_assets += [make_sub_asset(f"S{i}", "A1", f"S{i - 1}") for i in range(1, depth)]
    result = find_all_descendants("A1", None, sub_assets)
    assert len(result) == depth
    assert result[-1]["id"] == f"S{depth - 1}"
