from gulf_jobs.dedupe import dedupe, dedupe_key


def test_dedupe_drops_same_posting_across_sources(make_job):
    jobs = [
        make_job("Data Analyst", "Emaar", "Dubai, UAE", source="Bayt.com"),
        make_job("Data Analyst", "Emaar", "Dubai, UAE", source="GulfTalent"),
        make_job("Data Engineer", "Emaar", "Dubai, UAE", source="GulfTalent"),
    ]
    out = dedupe(jobs)
    assert len(out) == 2
    assert [j.title for j in out] == ["Data Analyst", "Data Engineer"]


def test_dedupe_key_is_case_insensitive(make_job):
    a = make_job("Project Manager", "ADNOC", "Abu Dhabi, UAE")
    b = make_job("PROJECT manager", "adnoc", "abu dhabi, uae")
    assert dedupe_key(a) == dedupe_key(b)
    assert dedupe([a, b]) == [a]


def test_first_occurrence_wins_on_ties(make_job):
    first = make_job("Accountant", "Qatar Airways", "Doha, Qatar", description="first", source="Bayt.com")
    second = make_job("Accountant", "Qatar Airways", "Doha, Qatar", description="second", source="NaukriGulf")
    out = dedupe([first, second])
    assert len(out) == 1
    assert out[0].description == "first"
    assert out[0].source == "Bayt.com"


def test_same_title_and_company_in_other_location_is_kept(make_job):
    jobs = [
        make_job("HR Manager", "Majid Al Futtaim", "Dubai, UAE"),
        make_job("HR Manager", "Majid Al Futtaim", "Riyadh, Saudi Arabia"),
    ]
    assert len(dedupe(jobs)) == 2


def test_dedupe_is_idempotent(make_job):
    jobs = [
        make_job("A", "X", "Doha"),
        make_job("a", "x", "doha"),
        make_job("B", "X", "Doha"),
        make_job("A", "Y", "Doha"),
        make_job("B", "x", "DOHA"),
    ]
    once = dedupe(jobs)
    assert dedupe(once) == once
    assert len(once) == 3


def test_dedupe_empty():
    assert dedupe([]) == []
