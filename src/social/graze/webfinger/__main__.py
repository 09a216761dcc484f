from social.graze.webfinger.cli import main

main()
