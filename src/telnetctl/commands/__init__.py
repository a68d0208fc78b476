"""Click plumbing shared by the telnetctl command."""
