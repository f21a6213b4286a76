"""Task orchestration agent: planning, execution and resilience."""
