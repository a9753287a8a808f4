from terrain_profile.cli import main

main()
