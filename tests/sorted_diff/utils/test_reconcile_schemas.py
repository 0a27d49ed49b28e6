import pytest

from src.sorted_diff.utils.schema import reconcile_schemas


def test_given_same_columns_in_same_order_when_reconciling_strictly_then_comparable() -> (
    None
):
    # When
    result = reconcile_schemas(["id", "a", "b"], ["id", "a", "b"], strict=True)

    # Then
    assert result.comparable
    assert result.strict


def test_given_permuted_columns_when_reconciling_strictly_then_not_comparable() -> None:
    # When
    result = reconcile_schemas(["id", "a", "b"], ["id", "b", "a"], strict=True)

    # Then
    assert not result.comparable
    assert result.columns1 == ["id", "a", "b"]
    assert result.columns2 == ["id", "b", "a"]


def test_given_permuted_columns_when_reconciling_permissively_then_comparable() -> None:
    # When
    result = reconcile_schemas(["id", "a", "b"], ["b", "id", "a"], strict=False)

    # Then
    assert result.comparable
    assert not result.strict


@pytest.mark.parametrize("strict", [True, False])
def test_given_different_column_names_when_reconciling_then_not_comparable(
    strict: bool,
) -> None:
    # When
    result = reconcile_schemas(["id", "val"], ["id", "other"], strict=strict)

    # Then
    assert not result.comparable
    assert result.strict is strict


def test_given_extra_column_when_reconciling_permissively_then_not_comparable() -> None:
    # When
    result = reconcile_schemas(["id", "a"], ["id", "a", "b"])

    # Then
    assert not result.comparable


def test_given_repeated_column_name_when_reconciling_permissively_then_goes_unnoticed() -> (
    None
):
    # Given
    columns1 = ["id", "a", "a"]
    columns2 = ["id", "a"]

    # When
    permissive = reconcile_schemas(columns1, columns2, strict=False)
    strict = reconcile_schemas(columns1, columns2, strict=True)

    # Then
    assert permissive.comparable
    assert not strict.comparable


if __name__ == "__main__":
    pytest.main([__file__])
