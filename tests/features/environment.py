# tests/features/environment.py

import os
import requests


def before_all(context):
    """
    Se ejecuta antes de cualquier escenario:
    - Configura los endpoints de los micros (sobrescribibles por entorno).
    - Comprueba que el servicio de Licencias responde.
    - Genera environment.properties para Allure.
    """
    # 1. Endpoints
    context.base_urls = {
        "licencias": os.getenv("LICENCIAS_URL", "http://localhost:3001"),
        "portal_paciente": os.getenv("PORTAL_PACIENTE_URL", "http://localhost:3002"),
        "validador_aseguradora": os.getenv("VALIDADOR_ASEGURADORA_URL", "http://localhost:3003"),
    }

    # 2. Servicio de Licencias arriba
    resp = requests.get(f"{context.base_urls['licencias']}/health", timeout=5)
    resp.raise_for_status()

    # 3. Generar environment.properties para Allure
    results_dir = "reports/behave_results"
    os.makedirs(results_dir, exist_ok=True)
    props = "\n".join(f"{name.upper()}={url}"
                      for name, url in context.base_urls.items())
    with open(os.path.join(results_dir, "environment.properties"), "w") as f:
        f.write(props)
