"""Jobs de línea de comandos (``python -m neurorbm.jobs.<cmd>``)."""
