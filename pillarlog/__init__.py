"""pillarlog: habits, moods and friendships backend."""
