"""Convert Playwright test run reports into Xray import payloads."""
