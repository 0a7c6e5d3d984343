"""Adapters – MongoDB persistence and RabbitMQ messaging."""
