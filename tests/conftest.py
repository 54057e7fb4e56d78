# tests/conftest.py
"""
Fixtures compartilhados para testes do dagflow.

Este módulo define fixtures reutilizáveis que fornecem:
- contexto de execução controlado (RunContext)
- fábricas de Steps instrumentados (registram chamadas)
- configurações YAML mínimas para loader e builder

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas
    - Handlers registram cada invocação em uma lista compartilhada

Invariantes:
    - Nenhuma fixture executa workflow
    - Nenhuma fixture realiza I/O

Limites explícitos:
    - Não substituir testes de integração
"""

from datetime import datetime, timezone

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def defaults_yaml() -> str:
    """YAML de defaults com um workflow Dag completo."""
    return """\
workflow:
  type: dag
  id: ingest
  name: Ingest
  runnables:
    - {id: fetch, name: Fetch, handler: fetch}
    - {id: clean, handler: clean}
    - {id: load, handler: load}
  dependencies:
    clean: [fetch]
    load: [clean]
engine:
  tags: [nightly]
"""


@pytest.fixture
def local_yaml() -> str:
    """YAML de override local (renomeia o workflow e troca as tags)."""
    return """\
workflow:
  name: Ingest (local)
engine:
  tags: [dev]
"""


# =====================================================
# Execução
# =====================================================

@pytest.fixture
def dummy_ctx():
    """RunContext determinístico (run_id e created_at fixos)."""
    from dagflow.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config={},
        meta={"source": "pytest"},
    )


@pytest.fixture
def calls():
    """Lista compartilhada onde os handlers registram o próprio nome."""
    return []


@pytest.fixture
def recording_handler(calls):
    """
    Fábrica de handlers que registram a invocação em `calls` e gravam
    `data[key] = value` (por padrão `data[name] = True`).
    """
    def make(name, key=None, value=True):
        def handler(ctx, data):
            calls.append(name)
            data[key or name] = value
            return ctx, data
        return handler

    return make


@pytest.fixture
def failing_handler(calls):
    """Fábrica de handlers que gravam uma mutação parcial e levantam RuntimeError."""
    def make(name, error=None):
        err = error or RuntimeError(f"{name} failed")

        def handler(ctx, data):
            calls.append(name)
            data[f"{name}_partial"] = True
            raise err
        return handler

    return make


@pytest.fixture
def make_step(recording_handler):
    """Fábrica de Steps com handler instrumentado."""
    from dagflow.core.engine.step import Step

    def make(step_id, handler=None, name=None):
        return Step(id=step_id, name=name, handler=handler or recording_handler(step_id))

    return make
