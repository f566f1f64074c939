from alameda.env import get_ai_service_address, get_datahub_address


def test_datahub_default(monkeypatch):
    monkeypatch.delenv("ALAMEDA_DATAHUB_ADDRESS", raising=False)
    assert get_datahub_address() == "datahub.alameda.svc.cluster.local:50050"


def test_datahub_from_environment(monkeypatch):
    monkeypatch.setenv("ALAMEDA_DATAHUB_ADDRESS", "localhost:9000")
    assert get_datahub_address() == "localhost:9000"


def test_datahub_empty_value_uses_default(monkeypatch):
    monkeypatch.setenv("ALAMEDA_DATAHUB_ADDRESS", "")
    assert get_datahub_address() == "datahub.alameda.svc.cluster.local:50050"


def test_ai_service_default(monkeypatch):
    monkeypatch.delenv("ALAMEDA_AI_SERVER_ADDRESS", raising=False)
    assert get_ai_service_address() == "alameda-ai.alameda.svc.cluster.local:50051"


def test_ai_service_from_environment(monkeypatch):
    monkeypatch.setenv("ALAMEDA_AI_SERVER_ADDRESS", "ai.local:1234")
    assert get_ai_service_address() == "ai.local:1234"


def test_ai_service_empty_value_uses_default(monkeypatch):
    monkeypatch.setenv("ALAMEDA_AI_SERVER_ADDRESS", "")
    assert get_ai_service_address() == "alameda-ai.alameda.svc.cluster.local:50051"