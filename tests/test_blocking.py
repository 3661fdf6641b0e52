from itertools import combinations

from person_dedupe.config import ResolutionConfig
from person_dedupe.datasets import ReferenceDatasetGenerator
from person_dedupe.models import CandidatePair
from person_dedupe.steps.blocking import BlockingCandidateGenerator
from person_dedupe.steps.corporate import CorporateContactDetector
from person_dedupe.steps.matcher import PairMatcher
from person_dedupe.steps.normalize import RecordNormalizer


def test_pair_sharing_several_keys_is_emitted_once(lead, contact) -> None:
    records = RecordNormalizer().normalize_all(
        [
            lead("L1", email="joe@acme.com", phone="5551234567"),
            contact("C1", email="joe@acme.com", phone="555-123-4567"),
        ]
    )

    pairs = list(BlockingCandidateGenerator().generate(records))

    assert len(pairs) == 1
    assert pairs[0].key == (("Contact", "C1"), ("Lead", "L1"))


def test_records_without_contact_points_never_block(lead, contact) -> None:
    records = RecordNormalizer().normalize_all(
        [
            lead("L1", first_name="Joe", last_name="Smith"),
            contact("C1", first_name="Joe", last_name="Smith"),
            lead("L2", email="a@test.example.com", first_name="Joe", last_name="Smith"),
        ]
    )

    assert list(BlockingCandidateGenerator().generate(records)) == []


def test_test_pattern_email_creates_no_email_block(lead, contact) -> None:
    records = RecordNormalizer().normalize_all(
        [
            lead("L1", email="a@test.example.com"),
            contact("C1", email="a@test.example.com"),
        ]
    )

    assert BlockingCandidateGenerator().build_blocks(records) == []


def test_generation_is_restartable(lead) -> None:
    records = RecordNormalizer().normalize_all([lead(f"L{i}", email=f"p{i}@acme.com") for i in range(5)])
    generator = BlockingCandidateGenerator()

    first = list(generator.generate(records))
    second = list(generator.generate(records))

    assert first == second
    assert len(first) == 10


def test_blocks_own_disjoint_pairs(lead, contact) -> None:
    records = RecordNormalizer().normalize_all(
        [
            lead("L1", email="joe@acme.com", phone="5551234567"),
            contact("C1", email="joe@acme.com", phone="5551234567"),
            contact("C2", email="ann@acme.com", phone="5551234567"),
        ]
    )
    generator = BlockingCandidateGenerator()

    per_block = [list(generator.pairs_in_block(block)) for block in generator.build_blocks(records)]
    emitted = [pair.key for pairs in per_block for pair in pairs]

    assert len(emitted) == len(set(emitted)) == 3


def test_refined_domain_blocks_use_name_keys(lead, contact) -> None:
    config = ResolutionConfig(refine_domain_blocks=True)
    records = RecordNormalizer(config).normalize_all(
        [
            lead("L1", email="joe@acme.com", first_name="Joe", last_name="Smith"),
            contact("C1", email="j.smith@acme.com", first_name="Joey", last_name="Smith"),
            contact("C2", email="ann@acme.com", first_name="Ann", last_name="Lee"),
        ]
    )

    pairs = list(BlockingCandidateGenerator(config).generate(records))

    assert [pair.key for pair in pairs] == [(("Contact", "C1"), ("Lead", "L1"))]


def test_blocking_finds_every_pair_an_exhaustive_scan_matches() -> None:
    leads, contacts = ReferenceDatasetGenerator(seed=3).generate(size=300, duplicate_rate=0.3)
    config = ResolutionConfig()
    records = RecordNormalizer(config).normalize_all([*leads, *contacts])
    corporate = CorporateContactDetector(config).detect(records)
    matcher = PairMatcher(corporate, config)

    exhaustive = {
        CandidatePair.of(a, b).key
        for a, b in combinations(records, 2)
        if any(signal.matched for signal in matcher.match(CandidatePair.of(a, b)))
    }
    blocked = {pair.key for pair in BlockingCandidateGenerator(config).generate(records, corporate)}

    assert corporate.corporate_phone_count > 0
    assert exhaustive
    assert exhaustive <= blocked


def test_refined_blocking_is_still_complete() -> None:
    leads, contacts = ReferenceDatasetGenerator(seed=11).generate(size=300, duplicate_rate=0.3)
    config = ResolutionConfig(refine_domain_blocks=True)
    records = RecordNormalizer(config).normalize_all([*leads, *contacts])
    corporate = CorporateContactDetector(config).detect(records)
    matcher = PairMatcher(corporate, config)

    exhaustive = {
        CandidatePair.of(a, b).key
        for a, b in combinations(records, 2)
        if any(signal.matched for signal in matcher.match(CandidatePair.of(a, b)))
    }
    blocked = {pair.key for pair in BlockingCandidateGenerator(config).generate(records, corporate)}

    assert exhaustive <= blocked


def test_corporate_phone_gets_no_block(lead, contact) -> None:
    config = ResolutionConfig(corporate_phone_threshold=3)
    records = RecordNormalizer(config).normalize_all(
        [
            lead("L1", first_name="Joe", last_name="Smith", email="joe@acme.com", phone="5551234567"),
            contact("C1", first_name="Joe", last_name="Smith", email="joe@acme.com", phone="5551234567"),
            contact("C2", first_name="Ann", last_name="Lee", email="ann@other.com", phone="5551234567"),
        ]
    )
    corporate = CorporateContactDetector(config).detect(records)
    generator = BlockingCandidateGenerator(config)

    blocks = generator.build_blocks(records, corporate)
    pairs = list(generator.generate(records, corporate))

    assert corporate.is_corporate_phone("5551234567")
    assert all(block.key[0] != "phone" for block in blocks)
    assert [pair.key for pair in pairs] == [(("Contact", "C1"), ("Lead", "L1"))]
    assert len(list(generator.generate(records))) == 3
