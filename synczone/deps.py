from synczone.planner import MeetingPlanner

_planner: MeetingPlanner | None = None

def get_planner() -> MeetingPlanner:
    global _planner
    if _planner is None:
        _planner = MeetingPlanner()
    return _planner
