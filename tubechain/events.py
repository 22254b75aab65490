def print_sink(event, fields):
    """
    Default event sink: one printed line per resolver event
    """
    provider = fields.get('provider')
    if event == 'attempt':
        print(f"Trying provider: {provider}")
    elif event == 'success':
        print(f"Success with provider: {provider}")
    elif event == 'decline':
        print(f"Provider {provider} declined ({fields.get('reason')}): {fields.get('detail')}")
    elif event == 'deadline':
        print(f"Deadline reached before provider {provider}, giving up")
    elif event == 'exhausted':
        print(f"All providers declined for {fields.get('identifier')}")
    else:
        print(f"{event}: {fields}")


class EventRecorder:
    """Sink that keeps every event in memory, mostly useful in tests."""

    def __init__(self):
        self.events = []

    def __call__(self, event, fields):
        self.events.append((event, dict(fields)))

    def names(self):
        return [event for event, _ in self.events]

    def of(self, name):
        return [fields for event, fields in self.events if event == name]
