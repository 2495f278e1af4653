from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from taxosync import app as app_module
from taxosync.app import export_records, sync_records
from taxosync.config.vvf import get_vvf_config
from taxosync.domain.ports.fetching import FetchFailure
from tests.support.records import FakeApiClient, FakeUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable

    from taxosync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from taxosync.config.http_resilience import ResilienceConfig
    from taxosync.config.vvf import VvfConfig


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> VvfConfig:
    monkeypatch.setenv("TAXOSYNC_API_BASE_URL", "https://api.example.org")
    monkeypatch.delenv("TAXOSYNC_HTTP_CACHE", raising=False)
    return get_vvf_config()


def _locations() -> str:
    return json.dumps(
        [
            {
                "id": 1,
                "codice": "CN",
                "descrizione": "Dipartimento",
                "tipo": "DIP",
                "idSedePadre": 0,
                "codAOO": "CNVVF",
                "sediChild": [
                    {
                        "id": 2,
                        "codice": "UFF",
                        "descrizione": "Ufficio Stampa",
                        "tipo": "UFF",
                        "idSedePadre": 1,
                        "codAOO": "CNVVF",
                    },
                    {
                        "id": 3,
                        "codice": "RM",
                        "descrizione": "COMANDO ROMA",
                        "tipo": "COM",
                        "idSedePadre": 1,
                        "codAOO": "COM-RM",
                    },
                ],
            }
        ]
    )


def _directors() -> str:
    return json.dumps(
        [
            {
                "codiceFiscale": "RSSMRA70A01H501U",
                "nome": "MARIO",
                "cognome": "ROSSI",
                "emailVigilfuoco": "mario.rossi@vigilfuoco.it",
                "qualifica": {"nome": "DIR", "descrizione": "DIRIGENTE"},
                "tipoPersonale": {"codice": "1"},
                "sede": {"id": "1"},
            }
        ]
    )


def _api(config: VvfConfig) -> FakeApiClient:
    return FakeApiClient(
        {
            config.locations_url: _locations(),
            config.directors_url: _directors(),
        }
    )


def _detail_api(config: VvfConfig) -> FakeApiClient:
    return FakeApiClient(
        {
            config.location_details_url_template.format(external_id="1"): json.dumps(
                {
                    "email": "dipartimento@vigilfuoco.it",
                    "telefono": "0646529",
                    "indirizzo": "Piazza del Viminale 1",
                    "cap": "00184",
                    "comune": "Roma",
                    "provincia": "RM",
                }
            )
        }
    )


def test_sync_records_all_kinds_into_sqlite(
    config: VvfConfig,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    run = sync_records(
        config=config,
        api=_api(config),
        detail_api=_detail_api(config),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert run.ok
    assert run.as_payload() == {
        "report": {
            "locations": {"created": 2, "updated": 0, "deleted": 0, "updatedDetails": 1},
            "directors": {"created": 1, "updated": 0, "deleted": 0},
        }
    }

    offices = export_records(
        "locations", config=config, unit_of_work_factory=sqlite_unit_of_work
    )
    assert [office["externalId"] for office in offices] == ["1", "2"]
    root, child = offices
    assert root["field_location_address"] == "Piazza del Viminale 1\n00184\nRoma RM"
    assert root["parentInternalId"] is None
    assert child["parentInternalId"] == root["internalId"]

    (director,) = export_records(
        "directors", config=config, unit_of_work_factory=sqlite_unit_of_work
    )
    assert director["name"] == "Mario Rossi"
    assert director["field_is_external"] is False


def test_sync_records_second_run_is_a_no_op(
    config: VvfConfig,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    for _ in range(2):
        run = sync_records(
            config=config,
            api=_api(config),
            detail_api=_detail_api(config),
            unit_of_work_factory=sqlite_unit_of_work,
        )

    assert run.as_payload() == {
        "report": {
            "locations": {"created": 0, "updated": 0, "deleted": 0, "updatedDetails": 0},
            "directors": {"created": 0, "updated": 0, "deleted": 0},
        }
    }


def test_sync_records_single_kind_error_payload(config: VvfConfig) -> None:
    uow = FakeUnitOfWork()
    api = FakeApiClient({config.directors_url: FetchFailure("HTTP 502 from upstream", 502)})

    run = sync_records(
        ["directors"], config=config, api=api, unit_of_work_factory=lambda: uow
    )

    assert run.as_payload() == {"error": "directors API unavailable: HTTP 502 from upstream"}
    assert uow.entered == 1
    assert uow.records.list_records("director_list") == []


def test_sync_records_rejects_unknown_kinds(config: VvfConfig) -> None:
    with pytest.raises(ValueError, match="Unknown kind"):
        sync_records(["teams"], config=config, api=FakeApiClient())


def test_sync_records_closes_the_clients_it_opens(
    config: VvfConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    opened: list[ClosingApiClient] = []

    class ClosingApiClient(FakeApiClient):
        def __init__(self, resilience: ResilienceConfig) -> None:
            super().__init__({config.directors_url: "[]"})
            self.resilience = resilience
            self.closed = False
            opened.append(self)

        def __enter__(self) -> ClosingApiClient:
            return self

        def __exit__(self, *exc_info: object) -> bool:
            self.closed = True
            return False

    monkeypatch.setattr(app_module, "HttpApiClient", ClosingApiClient)

    run = sync_records(["directors"], config=config, unit_of_work_factory=FakeUnitOfWork)

    assert run.as_payload() == {"report": {"created": 0, "updated": 0, "deleted": 0}}
    assert [client.resilience.name for client in opened] == ["vvf", "vvf-details"]
    assert all(client.closed for client in opened)
