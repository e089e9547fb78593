"""Basic usage examples for metarwatch."""

from metarwatch import InvalidStationError, MetarService, StationNotFoundError


def main() -> None:
    with MetarService() as wx:
        # Pull the bulk feed once
        print("=== Ingestion ===")
        wx.update()
        report = wx.last_report
        print(f"  ok={report.ok} features={report.features} cached={report.cached}")
        if not report.ok:
            print(f"  {report.error}")
            return

        # Full record for Hartsfield-Jackson
        print("\n=== KATL ===")
        try:
            (katl,) = wx.metar("KATL")
        except StationNotFoundError as exc:
            print(f"  {exc.message}")
        else:
            print(f"  {katl.raw_text}")
            if katl.temperature:
                print(f"  Temperature: {katl.temperature.celsius}C / {katl.temperature.fahrenheit}F")
            if katl.humidity_percent is not None:
                print(f"  Humidity: {katl.humidity_percent}%")

        # Only wind and flight category for every station on the chart
        print("\n=== Atlanta chart: wind & flight category ===")
        try:
            chart = wx.metar("atlanta", data=["wind", "flight_category"])
        except StationNotFoundError as exc:
            print(f"  {exc.message}")
            chart = []
        for obs in chart:
            wind = "n/a"
            if obs.wind:
                direction = "VRB" if obs.wind.degrees is None else f"{obs.wind.degrees:03d}"
                wind = f"{direction} @ {obs.wind.speed_kt}kt"
            print(f"  {obs.station}: {obs.flight_category or '?'} wind {wind}")

        # Stations outside the allow-list are rejected
        print("\n=== Unknown station ===")
        try:
            wx.metar("KJFK")
        except InvalidStationError as exc:
            print(f"  {exc.status_code}: {exc.message}")


if __name__ == "__main__":
    main()
