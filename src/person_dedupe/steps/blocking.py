from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import structlog

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import CandidatePair, NormalizedRecord, RecordKey
from person_dedupe.steps.corporate import CorporateIndex

logger = structlog.get_logger(__name__)

BlockKey = tuple[str, str]

EMAIL_INDEX = "email"
DOMAIN_INDEX = "domain"
PHONE_INDEX = "phone"


@dataclass(frozen=True, slots=True)
class Block:
    key: BlockKey
    members: tuple[NormalizedRecord, ...]


class BlockingCandidateGenerator:
    """Inverted-index blocking over exact email, email domain and phone digits.

    Only records sharing a block are compared. A pair that shares several
    blocks is owned by the smallest block key the two records have in common
    and is emitted from that block alone, so blocks can be processed
    independently (and in parallel) without a shared "seen" set.

    Records without email and phone never enter a block and are never compared.
    Phones in the corporate index get no block: the phone signal never matches
    on them, and email or domain pairs still come from their own blocks.
    """

    def __init__(self, config: ResolutionConfig | None = None) -> None:
        self._config = config or ResolutionConfig()

    def generate(
        self,
        records: Sequence[NormalizedRecord],
        corporate: CorporateIndex | None = None,
    ) -> Iterator[CandidatePair]:
        for block in self.build_blocks(records, corporate):
            yield from self.pairs_in_block(block, corporate)

    def build_blocks(
        self,
        records: Sequence[NormalizedRecord],
        corporate: CorporateIndex | None = None,
    ) -> list[Block]:
        index: dict[BlockKey, dict[RecordKey, NormalizedRecord]] = defaultdict(dict)
        for record in records:
            for key in self.keys_for(record, corporate):
                index[key].setdefault(record.key, record)

        blocks: list[Block] = []
        for key in sorted(index):
            members = index[key]
            if len(members) < 2:
                continue
            if len(members) >= self._config.large_block_warning:
                logger.warning("Large blocking bucket", index=key[0], value=key[1], size=len(members))
            blocks.append(Block(key=key, members=tuple(members[k] for k in sorted(members))))
        return blocks

    def pairs_in_block(self, block: Block, corporate: CorporateIndex | None = None) -> Iterator[CandidatePair]:
        member_keys = [frozenset(self.keys_for(record, corporate)) for record in block.members]
        for i, left in enumerate(block.members):
            for j in range(i + 1, len(block.members)):
                shared = member_keys[i] & member_keys[j]
                if min(shared) != block.key:
                    continue
                yield CandidatePair.of(left, block.members[j])

    def keys_for(self, record: NormalizedRecord, corporate: CorporateIndex | None = None) -> list[BlockKey]:
        keys: list[BlockKey] = []
        if record.email_normalized:
            keys.append((EMAIL_INDEX, record.email_normalized))
        if record.email_domain:
            domain_key = self._domain_key(record)
            if domain_key:
                keys.append((DOMAIN_INDEX, domain_key))
        phone = record.phone_digits
        if phone and (corporate is None or not corporate.is_corporate_phone(phone)):
            keys.append((PHONE_INDEX, phone))
        return keys

    def _domain_key(self, record: NormalizedRecord) -> str:
        if not self._config.refine_domain_blocks:
            return record.email_domain
        # Name keys are the secondary condition of the domain signal.
        if not (record.first_name_key and record.last_name_key):
            return ""
        return f"{record.email_domain}|{record.first_name_key}|{record.last_name_key}"
