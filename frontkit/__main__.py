from frontkit.pipeline import main

main()
