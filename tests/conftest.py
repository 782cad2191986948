import pytest

from phivolcs_api.records import Record

# trimmed copy of the PHIVOLCS page layout: a header row, three usable rows,
# one row without a magnitude and one without a date-time link
SAMPLE_PAGE = """
<html><head><title>PHIVOLCS Latest Earthquake Information</title></head>
<body>
<table class="MsoNormalTable" border="1">
  <tr>
    <td><b>Date - Time (Philippine Time)</b></td><td>Latitude</td><td>Longitude</td>
    <td>Depth</td><td>Mag</td>
  </tr>
  <tr>
    <td><span><a href="/2026_Earthquake_Information/October/2026_1017_0115_B1.html">17 October 2026 - 09:15 AM</a></span></td>
    <td>14.07°N</td><td>120.63°E</td><td>017 km</td><td>4.5</td>
    <td>023 km N 45° W of Calatagan
        (Batangas)   </td>
  </tr>
  <tr>
    <td><a href="/2026_Earthquake_Information/October/2026_1016_2302_B1.html">17 October 2026 - 07:02 AM</a></td>
    <td>9.86°N</td><td>126.30°E</td><td>010 km</td><td>5.8</td>
    <td>034 km S 88° E of General Luna (Surigao Del Norte)</td>
  </tr>
  <tr>
    <td><a href="/2026_Earthquake_Information/October/2026_1016_1540_B1.html">16 October 2026 - 11:40 PM</a></td>
    <td>16.40°N</td><td>120.60°E</td><td>025 km</td><td>2.1</td>
    <td>005 km N 12° W of Baguio City (Benguet)</td>
  </tr>
  <tr>
    <td><a href="/2026_Earthquake_Information/October/2026_1016_1400_B1.html">16 October 2026 - 10:00 PM</a></td>
    <td>12.00°N</td><td>121.00°E</td><td>001 km</td><td>  </td>
    <td>Somewhere in Mindoro</td>
  </tr>
  <tr>
    <td>16 October 2026 - 09:00 PM</td>
    <td>10.00°N</td><td>122.00°E</td><td>005 km</td><td>1.9</td>
    <td>Offshore Iloilo</td>
  </tr>
</table>
</body></html>
"""


@pytest.fixture
def page_html():
    return SAMPLE_PAGE


@pytest.fixture
def make_record():
    def _make(magnitude="4.5", location="Somewhere (Batangas)", date="17 October 2026",
              time="09:15 AM", depth="010 km"):
        return Record.build(
            date=date, time=time, latitude="14.07°N", longitude="120.63°E",
            depth=depth, magnitude=magnitude, location=location,
        )
    return _make


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
