from dutydesk.services import (
    duty_state_machine,
    filter_pipeline,
    paginator,
    task_state_machine,
    transition_service,
)


__all__ = [
    "duty_state_machine",
    "filter_pipeline",
    "paginator",
    "task_state_machine",
    "transition_service",
]
