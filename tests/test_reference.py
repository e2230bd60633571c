import pytest

from arxiv_linker.reference import abs_url, extract_identifier, feed_url, is_valid_identifier, is_valid_reference, pdf_url


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("https://arxiv.org/abs/2506.14767", "2506.14767"),
        ("http://arxiv.org/abs/1706.0376", "1706.0376"),
        ("https://www.arxiv.org/abs/2101.00001v2", "2101.00001"),
        ("see arxiv.org/abs/2101.12345 for details", "2101.12345"),
    ],
)
def test_extract_identifier(reference, expected):
    assert is_valid_reference(reference)
    assert extract_identifier(reference) == expected


@pytest.mark.parametrize(
    "reference",
    [
        "",
        "https://arxiv.org/pdf/2506.14767.pdf",
        "https://arxiv.org/abs/hep-th/9901001",
        "https://arxiv.org/abs/250.14767",
        "https://arxiv.org/abs/2506.123",
        "https://example.com/abs/2506.14767",
    ],
)
def test_invalid_references(reference):
    assert not is_valid_reference(reference)
    assert extract_identifier(reference) is None


def test_derived_urls():
    assert pdf_url("2506.14767") == "https://arxiv.org/pdf/2506.14767.pdf"
    assert abs_url("2506.14767") == "https://arxiv.org/abs/2506.14767"
    assert feed_url("2506.14767") == "https://export.arxiv.org/api/query?id_list=2506.14767"


@pytest.mark.parametrize("identifier", ["2506.14767", "1706.0376", "0704.0001"])
def test_abs_url_round_trip(identifier):
    assert is_valid_identifier(identifier)
    assert extract_identifier(abs_url(identifier)) == identifier


def test_identifier_format():
    assert not is_valid_identifier("2506.14767v1")
    assert not is_valid_identifier("")
