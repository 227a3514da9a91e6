from src.catalog.models import Citation, Condition, RatingLogic, SeverityLevel, Threshold
from src.catalog.presentation import (
    cfr_summary,
    citation_anchors,
    highlight,
    rating_lines,
    section_anchors,
    system_class_name,
)


def _citation(section: str, dc: str, title: str = "Title") -> Citation:
    return Citation(section=section, diagnostic_code=dc, title=title, url="https://example.test")


def test_system_class_name_variants() -> None:
    assert system_class_name("Mental Health") == "sys-mental-health"
    assert system_class_name("Neurological") == "sys-neurological"
    assert system_class_name("Orthopedic") == "sys-musculoskeletal"
    assert system_class_name("Ear") == "sys-ear"
    assert system_class_name("Auditory") == "sys-ear"
    assert system_class_name("Respiratory") == "sys-respiratory"
    assert system_class_name("Heart") == "sys-cardiovascular"
    assert system_class_name("Skin & Hair") == "sys-skin-hair"
    assert system_class_name("") == ""


def test_cfr_summary_uses_first_two_citations() -> None:
    condition = Condition(
        id="x",
        name="X",
        cfr=[
            _citation("38 CFR § 4.124a", "8520", "Sciatic"),
            _citation("38 CFR §4.124a", "8620", "Neuritis"),
            _citation("38 CFR § 4.124a", "8720", "Neuralgia"),
        ],
    )
    assert cfr_summary(condition) == "§ 4.124a • DC 8520 • Sciatic | § 4.124a • DC 8620 • Neuritis"
    assert cfr_summary(Condition(id="y", name="Y")) == ""


def test_highlight_escapes_and_marks() -> None:
    assert highlight("Knee <pain>", "knee") == '<mark class="hl">Knee</mark> &lt;pain&gt;'
    assert highlight("a.b", "") == "a.b"
    assert highlight("a.b axb", ".") == 'a<mark class="hl">.</mark>b axb'


def test_detail_anchors() -> None:
    condition = Condition(
        id="x",
        name="X",
        cfr=[_citation("38 CFR § 4.124a", "8520"), _citation("38 CFR § 4.124a", "8620")],
    )
    assert citation_anchors(condition) == ["jump-dc-8520", "jump-sec-4.124a", "jump-dc-8620"]
    assert "jump-refs" in section_anchors(condition)
    assert "jump-refs" not in section_anchors(Condition(id="y", name="Y"))


def test_rating_lines_variants() -> None:
    thresholds = Condition(
        id="k",
        name="K",
        rating_logic=RatingLogic(type="thresholds", thresholds=[Threshold(flexion_deg=45, rating_percent=10)]),
    )
    ladder = Condition(
        id="s",
        name="S",
        rating_logic=RatingLogic(type="severity_ladder", levels=[SeverityLevel(level="Mild", rating_percent=10)]),
    )
    summary = Condition(id="t", name="T", rating_logic=RatingLogic(summary="Single 10% rating."))
    assert rating_lines(thresholds) == ["Flexion limited to 45° → 10%"]
    assert rating_lines(ladder) == ["Mild → 10%"]
    assert rating_lines(summary) == ["Single 10% rating."]
    assert rating_lines(Condition(id="n", name="N")) == []
