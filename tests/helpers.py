from datetime import datetime

import pytz

SAST = pytz.timezone('Africa/Johannesburg')


def sast(year, month, day, hour=0, minute=0):
    return SAST.localize(datetime(year, month, day, hour, minute))


class StubFetcher:
    """Returns (or raises) the queued responses in order, repeating the last one"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def fetch(self):
        index = min(self.calls, len(self.responses) - 1)
        self.calls += 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response
