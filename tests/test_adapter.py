"""测试记录类型适配器."""

import pytest
from conftest import sample_record
from pydantic import BaseModel, ValidationError

from savetable import RecordAdapter, loads


class Inner(BaseModel):
    """嵌套结构体模型."""

    d: int


class Sample(BaseModel):
    """与测试表头对应的模型."""

    a: int
    b: list[int]
    c: Inner


class Wrong(BaseModel):
    """字段类型与数据不符的模型."""

    a: str
    missing: int


def test_validate_record(sample_file: bytes) -> None:
    """validate_record() 把记录验证为模型实例."""
    _, table = loads(sample_file)

    item = RecordAdapter(Sample).validate_record(table[0])

    assert item == Sample(a=7, b=[1, 2, 3], c=Inner(d=-5))


def test_validate_table(sample_file: bytes) -> None:
    """validate_table() 按读取顺序验证整张表."""
    _, table = loads(sample_file)

    items = RecordAdapter(Sample).validate_table(table)

    assert [i.a for i in items] == [7, 8]
    assert items[1].c.d == 300


def test_validate_generic_type(sample_file: bytes) -> None:
    """适配器也支持非模型类型."""
    _, table = loads(sample_file)

    plain = RecordAdapter(dict[str, object]).validate_record(table[0])

    assert plain["a"] == 7


def test_validation_error(sample_file: bytes) -> None:
    """记录与模型不符时抛出 pydantic.ValidationError."""
    _, table = loads(sample_file)

    with pytest.raises(ValidationError):
        RecordAdapter(Wrong).validate_record(table[0])


def test_sample_record_helper_is_consistent() -> None:
    """测试构造器生成的记录长度: 4 + 1 + 3 + 2."""
    assert len(sample_record()) == 10
