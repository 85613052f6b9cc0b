import yambib


def test_package_exposes_core_api() -> None:
    for name in ("Entry", "EntryType", "EntryTypeSpec", "FieldValue", "load", "LoadOptions"):
        assert name in yambib.__all__
        assert hasattr(yambib, name)


def test_version_is_a_string() -> None:
    assert isinstance(yambib.__version__, str)
    assert yambib.get_version() == yambib.__version__


def test_readme_example() -> None:
    entries = yambib.load(
        """
turing1950:
  type: article
  title: Computing Machinery and Intelligence
  author: Turing, Alan Mathison
  page-range: 433-460
  parent:
    type: periodical
    title: Mind
"""
    )
    article = entries[0]
    assert article.get_authors()[0].given_name == "Alan Mathison"
    assert article.get_page_total() == 27
    spec = yambib.EntryTypeSpec.of(
        yambib.EntryType.ARTICLE,
        parents=[yambib.EntryTypeSpec.of(yambib.EntryType.PERIODICAL)],
    )
    assert article.check_with_spec(spec)
