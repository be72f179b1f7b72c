"""Help From Founder: founder Q&A service, email dispatcher, and image relay."""
