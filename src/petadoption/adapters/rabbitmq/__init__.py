"""RabbitMQ adapter – event publisher and topology provisioner (aio-pika)."""
from petadoption.adapters.rabbitmq.publisher import RabbitMQEventPublisher
from petadoption.adapters.rabbitmq.topology import ProvisioningReport, RabbitMQTopologyProvisioner

__all__ = ["ProvisioningReport", "RabbitMQEventPublisher", "RabbitMQTopologyProvisioner"]
