"""
Dictionary Import/Export

Supports:
- JSON (one dictionary with its terms and definitions)
- CSV (one row per definition, may span several dictionaries)
"""

import csv
import io
import json
from typing import Dict, List, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError

from ..core.exceptions import NotFoundError, TransferError
from ..core.normalizer import TextNormalizer
from ..models.glossary import Dictionary, ImportResult
from ..storage.repository import GlossaryRepository

logger = structlog.get_logger()

CSV_HEADER = ["dictionary_name", "dictionary_description", "term", "definition", "context"]


class ImportedDefinition(BaseModel):
    definition: str
    context: Optional[str] = None


class ImportedTerm(BaseModel):
    term: str = ""
    definitions: List[ImportedDefinition] = Field(default_factory=list)


class DictionaryDocument(BaseModel):
    """Shape of a JSON dictionary export."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    terms: List[ImportedTerm]


class DictionaryTransfer:
    """Moves whole dictionaries in and out of the store as JSON or CSV."""

    def __init__(self, repository: GlossaryRepository) -> None:
        self.repository = repository
        self.normalizer = TextNormalizer()

    def _require_dictionary(self, dictionary_id: str) -> Dictionary:
        dictionary = self.repository.get_dictionary(dictionary_id)
        if dictionary is None:
            raise NotFoundError(f"Dictionary not found: {dictionary_id}")
        return dictionary

    # ==================== JSON ====================

    def export_json(self, dictionary_id: str) -> str:
        """
        Export a dictionary as pretty-printed JSON.

        Raises:
            NotFoundError: If the dictionary does not exist
        """
        dictionary = self._require_dictionary(dictionary_id)
        document = DictionaryDocument(
            name=dictionary.name,
            description=dictionary.description,
            terms=[
                ImportedTerm(
                    term=term.term,
                    definitions=[
                        ImportedDefinition(definition=d.definition, context=d.context)
                        for d in term.definitions
                    ],
                )
                for term in self.repository.list_terms(dictionary_id)
            ],
        )
        return json.dumps(document.model_dump(), ensure_ascii=False, indent=2)

    def import_json(self, data: str) -> ImportResult:
        """
        Import a JSON export as a new dictionary.

        Terms without definitions are skipped. A term listed more than once
        collects the definitions of every listing.

        Raises:
            TransferError: If the data is not JSON or has the wrong shape
            DuplicateDictionaryError: If the dictionary name is taken
        """
        try:
            raw = json.loads(data)
        except json.JSONDecodeError as e:
            raise TransferError("Invalid JSON format") from e

        try:
            document = DictionaryDocument.model_validate(raw)
        except ValidationError as e:
            raise TransferError("Invalid import data structure") from e

        dictionary = self.repository.create_dictionary(document.name, document.description)
        term_ids: Dict[str, str] = {}
        term_count = 0
        definition_count = 0

        for entry in document.terms:
            if not entry.term or not entry.definitions:
                continue

            normalized = self.normalizer.normalize(entry.term)
            definitions = entry.definitions
            if normalized not in term_ids:
                first, definitions = definitions[0], definitions[1:]
                added = self.repository.add_term(
                    dictionary.id, entry.term, first.definition, first.context or None
                )
                term_ids[normalized] = added.id
                term_count += 1
                definition_count += 1

            for extra in definitions:
                self.repository.add_definition(
                    term_ids[normalized], extra.definition, extra.context or None
                )
                definition_count += 1

        logger.info(
            "Imported dictionary from JSON",
            dictionary=dictionary.name,
            terms=term_count,
            definitions=definition_count,
        )
        return ImportResult(
            dictionaries=[dictionary], term_count=term_count, definition_count=definition_count
        )

    # ==================== CSV ====================

    def export_csv(self, dictionary_id: str) -> str:
        """
        Export a dictionary as CSV, one row per definition.

        Raises:
            NotFoundError: If the dictionary does not exist
        """
        dictionary = self._require_dictionary(dictionary_id)

        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for term in self.repository.list_terms(dictionary_id):
            for definition in term.definitions:
                writer.writerow([
                    dictionary.name,
                    dictionary.description or "",
                    term.term,
                    definition.definition,
                    definition.context or "",
                ])

        return output.getvalue().rstrip("\n")

    def import_csv(self, data: str) -> ImportResult:
        """
        Import CSV rows into existing or new dictionaries.

        Dictionaries are reused by name. A term already present in its
        dictionary receives the row's definition as an additional one.

        Raises:
            TransferError: If there is no header or no data row
        """
        rows = [row for row in csv.reader(io.StringIO(data)) if row]
        if len(rows) < 2:
            raise TransferError("CSV must have header and at least one data row")

        dictionaries: Dict[str, Dictionary] = {}
        term_ids: Dict[str, Dict[str, str]] = {}
        term_count = 0
        definition_count = 0

        for row in rows[1:]:
            if len(row) < len(CSV_HEADER):
                continue

            name, description, term, definition, context = row[:5]
            if not name or not term or not definition:
                continue

            dictionary = dictionaries.get(name)
            if dictionary is None:
                dictionary = self.repository.get_dictionary_by_name(name)
                if dictionary is None:
                    dictionary = self.repository.create_dictionary(name, description or None)
                dictionaries[name] = dictionary
                term_ids[name] = {}

            normalized = self.normalizer.normalize(term)
            known = term_ids[name]
            if normalized not in known:
                existing = [
                    t for t in self.repository.get_terms_by_normalized(normalized)
                    if t.dictionary_id == dictionary.id
                ]
                if not existing:
                    added = self.repository.add_term(
                        dictionary.id, term, definition, context or None
                    )
                    known[normalized] = added.id
                    term_count += 1
                    definition_count += 1
                    continue
                known[normalized] = existing[0].id

            self.repository.add_definition(known[normalized], definition, context or None)
            definition_count += 1

        logger.info(
            "Imported dictionaries from CSV",
            dictionaries=len(dictionaries),
            terms=term_count,
            definitions=definition_count,
        )
        return ImportResult(
            dictionaries=list(dictionaries.values()),
            term_count=term_count,
            definition_count=definition_count,
        )
