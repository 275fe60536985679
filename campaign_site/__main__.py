from campaign_site.build import main

main()
