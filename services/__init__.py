"""Пакет прикладных сервисов.

Подмодули не импортируются на уровне пакета: расчётное ядро
(``subscription_status``, ``commission``, ``reporting``) не должно тянуть
за собой peewee-сервисы. Импортируйте нужное напрямую, например:
    from services import client_service as cs
    from services.reporting import seller_summaries
"""

__all__: list[str] = []
