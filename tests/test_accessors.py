"""
tests/test_accessors.py — Entity Accessor Parameter Shaping
============================================================

Checks the exact form each accessor sends: fixed action names, omitted
empty identifiers and the two-alias student identifier contract.
"""

from __future__ import annotations

import logging

from helpers import run_async
from kelasguru.client import accessors
from kelasguru.constants import STUDENT_ID_ALIASES


class TestStudentQueries:
    def test_get_students_without_filters_sends_action_only(self, backend, api):
        run_async(accessors.get_students(api))
        assert backend.calls == [{"action": "getSiswa"}]

    def test_get_students_omits_empty_identifiers(self, backend, api):
        run_async(accessors.get_students(api, student_id="", class_id="C2"))
        assert backend.calls == [{"action": "getSiswa", "kelas_id": "C2"}]

    def test_get_students_by_id_and_class(self, backend, api):
        run_async(accessors.get_students(api, student_id="S1", class_id="C2"))
        assert backend.calls == [{"action": "getSiswa", "id": "S1", "kelas_id": "C2"}]

    def test_paginated_students(self, backend, api):
        backend.replies["getSiswa"] = {"success": True, "data": [], "total": 0}
        result = run_async(
            accessors.get_paginated_students(api, page=2, page_size=10, filters={"kelas_id": "C1"})
        )
        assert backend.calls == [{
            "action": "getSiswa",
            "page": "2",
            "pageSize": "10",
            "kelas_id": "C1",
            "paginated": "true",
        }]
        assert result.extra == {"total": 0}


class TestStudentMutations:
    def test_create_forwards_fields(self, backend, api):
        run_async(accessors.create_student(api, {"nama": "Budi", "nis": "1001"}))
        assert backend.calls == [{"action": "createSiswa", "nama": "Budi", "nis": "1001"}]

    def test_update_sends_both_identifier_aliases(self, backend, api):
        run_async(accessors.update_student(api, 42, {"nama": "Budi"}))
        form = backend.form_for("updateSiswa")
        assert form["nama"] == "Budi"
        for alias in STUDENT_ID_ALIASES:
            assert form[alias] == "42"

    def test_update_aliases_win_over_data(self, backend, api):
        run_async(accessors.update_student(api, "S9", {"id": "stale", "siswa_id": "stale"}))
        form = backend.form_for("updateSiswa")
        assert form["id"] == "S9"
        assert form["siswa_id"] == "S9"

    def test_delete_sends_only_aliases(self, backend, api):
        run_async(accessors.delete_student(api, "S3"))
        assert backend.calls == [{"action": "deleteSiswa", "id": "S3", "siswa_id": "S3"}]


class TestClasses:
    def test_get_classes_by_id(self, backend, api):
        run_async(accessors.get_classes(api, "C1"))
        assert backend.calls == [{"action": "getKelas", "id": "C1"}]

    def test_class_options_success(self, backend, api):
        backend.replies["getKelas"] = {"success": True, "data": [{"id": "C1"}]}
        assert run_async(accessors.fetch_class_options(api)) == [{"id": "C1"}]

    def test_class_options_failure_is_empty_list(self, backend, api, caplog):
        backend.replies["getKelas"] = {"success": False, "error": "Sheet missing"}
        with caplog.at_level(logging.ERROR):
            assert run_async(accessors.fetch_class_options(api)) == []
        assert "Sheet missing" in caplog.text


class TestStudentEndpoint:
    def test_login_probes_then_logs_in(self, backend, api):
        backend.replies["studentLogin"] = {"success": True, "data": {"id": "S1"}}
        result = run_async(accessors.student_login(api, "1001", "pw"))
        assert backend.actions() == ["debugSiswaData", "studentLogin"]
        assert backend.form_for("studentLogin") == {
            "action": "studentLogin", "nis": "1001", "password": "pw",
        }
        assert result.data == {"id": "S1"}

    def test_login_proceeds_when_probe_fails(self, backend, api):
        backend.replies["debugSiswaData"] = {"success": False, "error": "debug off"}
        backend.replies["studentLogin"] = {"success": True, "data": {"id": "S1"}}
        result = run_async(accessors.student_login(api, "1001", "pw"))
        assert result.success is True

    def test_grades_and_raw_gamification_use_siswa_id(self, backend, api):
        run_async(accessors.get_student_grades(api, "S1"))
        run_async(accessors.get_raw_gamification(api, "S1"))
        assert backend.calls == [
            {"action": "getSiswaNilai", "siswa_id": "S1"},
            {"action": "getSiswaGamification", "siswa_id": "S1"},
        ]

    def test_gamification_sources_send_no_params(self, backend, api):
        run_async(accessors.get_xp_records(api))
        run_async(accessors.get_badge_catalog(api))
        run_async(accessors.get_badge_awards(api))
        assert backend.calls == [
            {"action": "getGamifikasiXP"},
            {"action": "getGamifikasiBadge"},
            {"action": "getSiswaBadge"},
        ]
