"""Tests for keyword and checksum document classification."""

from docscan.classification.classifier import DocumentClassifier, classify
from docscan.models.document_type import DocumentType


class TestDocumentClassifier:
    """Tests for the DocumentClassifier class."""

    def setup_method(self) -> None:
        self.classifier = DocumentClassifier()

    def test_aadhaar_keyword_and_checksum(self, aadhaar_fragments) -> None:
        scores = self.classifier.score(aadhaar_fragments)
        assert scores[DocumentType.AADHAAR] == 1 + 5.0 * 0.95
        assert self.classifier.classify(aadhaar_fragments) == DocumentType.AADHAAR

    def test_pan_checksum_only(self, fragments) -> None:
        assert self.classifier.classify(
            fragments("ABCDE1234F", confidence=0.95)
        ) == DocumentType.PAN

    def test_pan_card(self, pan_fragments) -> None:
        assert self.classifier.classify(pan_fragments) == DocumentType.PAN

    def test_card_tie_goes_to_credit(self, fragments) -> None:
        frags = fragments("4111111111111111", confidence=0.95)
        scores = self.classifier.score(frags)
        assert scores[DocumentType.CREDIT_CARD] == scores[DocumentType.DEBIT_CARD]
        assert self.classifier.classify(frags) == DocumentType.CREDIT_CARD

    def test_allowed_types_restrict_candidates(self, fragments) -> None:
        frags = fragments("4111111111111111", confidence=0.95)
        result = self.classifier.classify(frags, [DocumentType.DEBIT_CARD])
        assert result == DocumentType.DEBIT_CARD

    def test_allowed_types_can_exclude_winner(self, aadhaar_fragments) -> None:
        result = self.classifier.classify(aadhaar_fragments, [DocumentType.INVOICE])
        assert result is None

    def test_voter_id(self, fragments) -> None:
        frags = fragments("ELECTION COMMISSION OF INDIA", "ABC1234567")
        scores = self.classifier.score(frags)
        assert scores[DocumentType.VOTER_ID] == 1 + 3.0 + 2.0
        assert self.classifier.classify(frags) == DocumentType.VOTER_ID

    def test_driving_license(self, fragments) -> None:
        frags = fragments(
            "TRANSPORT DEPARTMENT", "Driving Licence", "MH1420110062821"
        )
        assert self.classifier.classify(frags) == DocumentType.DRIVING_LICENSE

    def test_bare_license_number_is_not_a_voter_number(self, fragments) -> None:
        frags = fragments("MH1420110062821", confidence=0.95)
        scores = self.classifier.score(frags)
        assert DocumentType.VOTER_ID not in scores
        assert scores[DocumentType.DRIVING_LICENSE] == 2.0
        assert self.classifier.classify(frags) == DocumentType.DRIVING_LICENSE

    def test_bare_epic_number(self, fragments) -> None:
        frags = fragments("ABC1234567", confidence=0.95)
        scores = self.classifier.score(frags)
        assert DocumentType.DRIVING_LICENSE not in scores
        assert self.classifier.classify(frags) == DocumentType.VOTER_ID

    def test_passport_mrz(self, fragments, mrz_lines) -> None:
        frags = fragments(*mrz_lines, confidence=0.9)
        scores = self.classifier.score(frags)
        assert abs(scores[DocumentType.PASSPORT] - 2 * 3.0 * 0.9) < 1e-9
        assert self.classifier.classify(frags) == DocumentType.PASSPORT

    def test_invoice_keywords(self, fragments) -> None:
        frags = fragments("TAX INVOICE", "Invoice No: INV-001", "Total: 500")
        assert self.classifier.classify(frags) == DocumentType.INVOICE

    def test_below_min_score(self, fragments) -> None:
        assert self.classifier.classify(fragments("passport")) is None
        assert self.classifier.classify(fragments("quick brown fox")) is None

    def test_empty_input(self) -> None:
        assert self.classifier.score([]) == {}
        assert self.classifier.classify([]) is None

    def test_scores_keep_declaration_order(self, fragments) -> None:
        frags = fragments("Government of India", "2341 2341 2346", "4111111111111111")
        order = list(DocumentType)
        keys = list(self.classifier.score(frags))
        assert keys == sorted(keys, key=order.index)

    def test_zero_scores_omitted(self, aadhaar_fragments) -> None:
        scores = self.classifier.score(aadhaar_fragments)
        assert DocumentType.LAB_REPORT not in scores
        assert all(value > 0 for value in scores.values())

    def test_custom_min_score(self, aadhaar_fragments) -> None:
        strict = DocumentClassifier(min_score=10.0)
        assert strict.classify(aadhaar_fragments) is None


class TestClassifyFunction:
    """Tests for the module-level classify helper."""

    def test_matches_default_classifier(self, aadhaar_fragments) -> None:
        assert classify(aadhaar_fragments) == DocumentType.AADHAAR
