"""
Integration tests for LedgerService flows, using in-memory storage.
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from spendwise.audit import AuditLogger
from spendwise.ledger import ExpenseFilter
from spendwise.models.audit import AuditEventType
from spendwise.models.expense import Expense, LedgerPreferences
from spendwise.models.reports import ImportStatus
from spendwise.orchestrator import (
    DuplicateExpenseError,
    ExpenseNotFoundError,
    LedgerError,
    LedgerService,
    create_ledger_service,
)
from spendwise.services.storage import (
    ExpenseStorageInterface,
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
    InMemoryPreferencesStorage,
    StorageError,
)


HEADER_LINE = "id,date,amount,category,description,tags"


class FailingExpenseStorage(ExpenseStorageInterface):
    """Loads fine, refuses every save."""

    def __init__(self, expenses=None):
        self._expenses = list(expenses or [])

    def load(self):
        return list(self._expenses)

    def save(self, expenses):
        raise StorageError("disk full")


@pytest.fixture
def expense_storage(sample_expenses):
    return InMemoryExpenseStorage(sample_expenses)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def service(expense_storage, audit_storage):
    return LedgerService(
        expense_storage=expense_storage,
        preferences_storage=InMemoryPreferencesStorage(
            LedgerPreferences(daily_limit=Decimal("90"))
        ),
        audit_logger=AuditLogger(audit_storage),
    )


class TestImportFlow:
    """Tests for the CSV import flow."""

    def test_clean_import_is_applied(self, service, expense_storage):
        text = f"{HEADER_LINE}\n1,2023-10-25,500,Changed,Modified,\n4,2023-10-26,20,Food,Snack,"
        outcome = service.import_csv(text)

        assert outcome.status == ImportStatus.APPLIED
        assert outcome.applied is True
        assert outcome.stats.added == 1
        assert outcome.stats.updated == 1
        assert expense_storage.save_count == 1

        stored = expense_storage.load()
        assert [e.id for e in stored] == ["1", "2", "3", "4"]
        assert stored[0].amount == Decimal("500")

    def test_row_problems_need_confirmation(self, service, expense_storage):
        text = f"{HEADER_LINE}\n4,2023-10-26,abc,Food,x,\n5,2023-10-26,5,Food,y,"
        outcome = service.import_csv(text)

        assert outcome.status == ImportStatus.NEEDS_CONFIRMATION
        assert outcome.applied is False
        assert outcome.stats is None
        assert len(outcome.decoded.expenses) == 1
        assert expense_storage.save_count == 0
        assert len(expense_storage.load()) == 3

    def test_accept_partial_applies_valid_rows(self, service, expense_storage):
        text = f"{HEADER_LINE}\n4,2023-10-26,abc,Food,x,\n5,2023-10-26,5,Food,y,"
        outcome = service.import_csv(text, accept_partial=True)

        assert outcome.status == ImportStatus.APPLIED
        assert outcome.stats.added == 1
        assert [e.id for e in expense_storage.load()] == ["1", "2", "3", "5"]

    def test_file_problem_is_rejected(self, service, expense_storage):
        outcome = service.import_csv("id,date,amount\nbad_line_data", accept_partial=True)

        assert outcome.status == ImportStatus.REJECTED_FILE
        assert outcome.decoded.file_problem is not None
        assert expense_storage.save_count == 0

    def test_import_events_share_correlation_id(self, service, audit_storage):
        cid = uuid4()
        service.import_csv(f"{HEADER_LINE}\n9,2023-10-26,5,Food,y,", correlation_id=cid)

        events = audit_storage.get_events_by_correlation_id(cid)
        assert [e.event_type for e in events] == [
            AuditEventType.IMPORT_DECODED,
            AuditEventType.IMPORT_APPLIED,
        ]

    def test_needs_confirmation_is_audited(self, service, audit_storage):
        cid = uuid4()
        service.import_csv(f"{HEADER_LINE}\n ,2023-10-26,5,Food,y,", correlation_id=cid)

        events = audit_storage.get_events_by_correlation_id(cid)
        assert events[-1].event_type == AuditEventType.IMPORT_NEEDS_CONFIRMATION


class TestExportFlow:

    def test_export_round_trips_through_import(self, service, sample_expenses):
        text = service.export_csv()
        assert text.split("\n")[0] == HEADER_LINE

        fresh = LedgerService(expense_storage=InMemoryExpenseStorage())
        outcome = fresh.import_csv(text)
        assert outcome.stats.added == 3
        assert fresh.list_expenses() == sample_expenses

    def test_export_is_audited(self, service, audit_storage):
        service.export_csv()
        latest = audit_storage.get_recent_events(limit=1)[0]
        assert latest.event_type == AuditEventType.EXPORT_GENERATED
        assert latest.details["row_count"] == 3


class TestRecordEdits:
    """Tests for add / edit / delete through the service."""

    def test_add_prepends_and_saves(self, service, expense_storage):
        expense = Expense(id="4", date="2023-10-26", amount=Decimal("12"))
        service.add_expense(expense)
        assert expense_storage.load()[0] == expense
        assert expense_storage.save_count == 1

    def test_add_duplicate_raises(self, service, expense_storage):
        with pytest.raises(DuplicateExpenseError):
            service.add_expense(Expense(id="1", date="2023-10-26", amount=Decimal("12")))
        assert expense_storage.save_count == 0

    def test_edit_replaces(self, service, expense_storage):
        edited = Expense(id="2", date="2023-10-25", amount=Decimal("31"), category="Transport")
        service.edit_expense(edited)
        assert expense_storage.load()[1].amount == Decimal("31")

    def test_edit_unknown_raises(self, service):
        with pytest.raises(ExpenseNotFoundError):
            service.edit_expense(Expense(id="404", date="2023-10-25", amount=Decimal("1")))

    def test_delete(self, service, expense_storage):
        assert service.delete_expense("3") is True
        assert service.delete_expense("3") is False
        assert [e.id for e in expense_storage.load()] == ["1", "2"]
        assert expense_storage.save_count == 1

    def test_edits_are_audited(self, service, audit_storage):
        service.add_expense(Expense(id="4", date="2023-10-26", amount=Decimal("12")))
        service.delete_expense("4")
        types = [e.event_type for e in audit_storage.get_recent_events()]
        assert types[:2] == [AuditEventType.EXPENSE_DELETED, AuditEventType.EXPENSE_ADDED]

    def test_list_with_criteria(self, service):
        result = service.list_expenses(ExpenseFilter(category="Housing"))
        assert [e.id for e in result] == ["3"]


class TestSaveFailures:

    def test_failed_save_is_audited_and_raised(self, sample_expenses, audit_storage):
        service = LedgerService(
            expense_storage=FailingExpenseStorage(sample_expenses),
            audit_logger=AuditLogger(audit_storage),
        )
        cid = uuid4()
        with pytest.raises(StorageError):
            service.import_csv(f"{HEADER_LINE}\n9,2023-10-26,5,Food,y,", correlation_id=cid)

        events = audit_storage.get_events_by_correlation_id(cid)
        assert events[-1].event_type == AuditEventType.SAVE_FAILED
        assert events[-1].error_message == "disk full"


class TestDashboardAndPreferences:

    def test_dashboard_uses_stored_limit(self, service):
        summary = service.dashboard("2023-10-25")
        assert summary.daily.today_spend == Decimal("80")
        assert summary.daily.is_near_limit is True
        assert summary.total_spend == Decimal("180")

    def test_update_preferences(self, service):
        service.update_preferences(LedgerPreferences(daily_limit=Decimal("50")))
        assert service.dashboard("2023-10-25").daily.is_over_limit is True

    def test_update_preferences_without_storage_raises(self):
        service = LedgerService(expense_storage=InMemoryExpenseStorage())
        with pytest.raises(LedgerError):
            service.update_preferences(LedgerPreferences())

    def test_preferences_fall_back_to_settings(self):
        service = LedgerService(expense_storage=InMemoryExpenseStorage())
        assert service.preferences().daily_limit == Decimal("1000")


class TestFactory:

    def test_in_memory_service(self):
        service = create_ledger_service(use_storage=False)
        assert service.list_expenses() == []
        outcome = service.import_csv(f"{HEADER_LINE}\n1,2023-10-25,5,Food,x,")
        assert outcome.applied
        assert len(service.list_expenses()) == 1

    def test_file_backed_service(self, tmp_path, monkeypatch):
        from spendwise.config import get_settings

        monkeypatch.setenv("SPENDWISE_STORAGE_DATA_PATH", str(tmp_path / "data.json"))
        monkeypatch.setenv("SPENDWISE_STORAGE_PREFERENCES_PATH", str(tmp_path / "prefs.json"))
        monkeypatch.setenv("SPENDWISE_STORAGE_AUDIT_PATH", str(tmp_path / "audit.jsonl"))
        get_settings.cache_clear()
        try:
            service = create_ledger_service()
            service.add_expense(Expense(id="1", date="2023-10-25", amount=Decimal("5")))
            assert (tmp_path / "data.json").exists()
            assert (tmp_path / "audit.jsonl").exists()
        finally:
            get_settings.cache_clear()
