from app.config import CONFIG
from app.messaging import NtfyNotifier, build_test_notification
from app.teams import TEAM_BY_ABBREV


def main():
    topic = input("Enter your ntfy topic: ").strip()
    abbrev = input("Team abbreviation (blank for generic): ").strip().upper()

    notifier = NtfyNotifier(CONFIG)
    notifier.send(topic, build_test_notification(TEAM_BY_ABBREV.get(abbrev)))
    print(f"Sent to {CONFIG.ntfy_url}/{topic}")

if __name__ == "__main__":
    main()
