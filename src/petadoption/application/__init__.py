"""Application layer – command handling pipeline and the outbox dispatcher."""
